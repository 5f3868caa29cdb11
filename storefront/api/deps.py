# storefront/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.repos.user_repo import UserRepo


def get_current_user(
    x_user_id: int | None = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> UserModel:
    """Caller identity, the header is set by the auth layer in front of this service."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail={"code": "UNAUTHORIZED", "message": "Authorization required"})
    user = UserRepo(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail={"code": "UNAUTHORIZED", "message": "Unknown user"})
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail={"code": "FORBIDDEN", "message": "Insufficient permissions"})
    return user
