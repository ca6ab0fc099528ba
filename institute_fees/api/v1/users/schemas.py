from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from institute_fees.core.enums import AppRole


class UserResponse(BaseModel):
    id: UUID
    full_name: str
    email: str
    role: AppRole
    is_approved: bool
    approved_at: Optional[datetime] = None
    created_at: datetime


class UserApprovalUpdate(BaseModel):
    is_approved: bool


class UserRoleUpdate(BaseModel):
    role: AppRole
