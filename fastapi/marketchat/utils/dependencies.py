from typing import Optional

from fastapi import Header, HTTPException, status

from marketchat.utils.ids import canonical_id


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Id of the caller, as set by the upstream authentication gateway."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "Authentication required"},
        )
    return canonical_id(x_user_id)
