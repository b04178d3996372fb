"""Admin interface mounted on the API application."""

from fastapi import FastAPI
from sqladmin import Admin

from boxoffice.admin.auth import AdminAuth
from boxoffice.admin.views import (
    CustomerAdmin,
    FilmAdmin,
    ReservationAdmin,
    ReservationToolsView,
    RoomAdmin,
    ScreeningAdmin,
)
from boxoffice.config import settings
from boxoffice.database import engine


def setup_admin(app: FastAPI) -> Admin:
    """Attach the SQLAdmin views to ``app`` under /admin."""
    auth = AdminAuth(secret_key=settings.admin_secret_key)
    admin = Admin(app, engine, authentication_backend=auth, title="Box Office Admin")
    for view in [
        FilmAdmin,
        RoomAdmin,
        CustomerAdmin,
        ScreeningAdmin,
        ReservationAdmin,
        ReservationToolsView,
    ]:
        admin.add_view(view)
    return admin
