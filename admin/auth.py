import secrets

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from core.config import Settings


def _matches(provided, expected: str) -> bool:
    return bool(provided) and secrets.compare_digest(str(provided).encode(), expected.encode())


class AdminAuth(AuthenticationBackend):
    """Session login for the staff console against ADMIN_USERNAME/ADMIN_PASSWORD."""

    def __init__(self, settings: Settings):
        super().__init__(secret_key=settings.SECRET_KEY)
        self.username = settings.ADMIN_USERNAME
        self.password = settings.ADMIN_PASSWORD

    async def login(self, request: Request) -> bool:
        form = await request.form()
        if _matches(form.get("username"), self.username) and _matches(form.get("password"), self.password):
            request.session["admin"] = True
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("admin", False)
