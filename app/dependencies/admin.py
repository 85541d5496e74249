import secrets
from typing import Optional
from fastapi import Header
from app.config import settings
from app.exceptions import ForbiddenError

def require_admin(x_admin_password: Optional[str] = Header(default=None)):
    if not x_admin_password or not secrets.compare_digest(
        x_admin_password, settings.admin_password
    ):
        raise ForbiddenError()
    return True
