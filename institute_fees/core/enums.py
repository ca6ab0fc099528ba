from enum import Enum


class AppRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class FeesStatus(str, Enum):
    paid = "paid"
    not_paid = "not_paid"


class FeesFilter(str, Enum):
    all = "all"
    paid = "paid"
    not_paid = "not_paid"


class PaymentToggleOutcome(str, Enum):
    APPLIED = "APPLIED"
    UNCHANGED = "UNCHANGED"
    DENIED = "DENIED"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"


class AuditEntity(str, Enum):
    STUDENT = "STUDENT"
    PAYMENT = "PAYMENT"
    USER = "USER"


class DatePreset(str, Enum):
    this_month = "this_month"
    last_month = "last_month"
    last_3_months = "last_3_months"
    last_6_months = "last_6_months"
    this_year = "this_year"
    custom = "custom"
