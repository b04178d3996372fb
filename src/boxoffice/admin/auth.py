"""SQLAdmin authentication backend."""

import hmac

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from boxoffice.config import settings


class AdminAuth(AuthenticationBackend):
    """Single operator account configured through settings."""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username") or "")
        password = str(form.get("password") or "")
        ok = hmac.compare_digest(username, settings.admin_username) and hmac.compare_digest(
            password, settings.admin_password
        )
        if ok:
            request.session.update({"authenticated": True, "operator": username})
        return ok

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("authenticated", False)
