from institute_fees.core.models.audit_log import AuditLog
from institute_fees.core.models.student import MonthlyPayment, Student
