from fastapi import Depends, HTTPException, status

from institute_fees.auth.dependencies import require_approved_user
from institute_fees.auth.schemas import CurrentUser


def is_admin(current_user: CurrentUser) -> bool:
    return current_user.is_admin


async def require_admin(
    current_user: CurrentUser = Depends(require_approved_user),
) -> CurrentUser:
    """Require the admin role. Used for user management and the audit trail."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only an admin can perform this action",
        )
    return current_user
