"""SQLAdmin model and tool views."""

from sqladmin import BaseView, ModelView, expose
from starlette.requests import Request
from starlette.responses import HTMLResponse

from boxoffice.database import AsyncSessionLocal
from boxoffice.models.customer import Customer
from boxoffice.models.film import Film
from boxoffice.models.reservation import Reservation
from boxoffice.models.room import Room
from boxoffice.models.screening import Screening
from boxoffice.tasks.expiry_job import expire_overdue_reservations
from boxoffice.utils.timerange import utcnow


class FilmAdmin(ModelView, model=Film):
    column_list = [Film.id, Film.title, Film.duration_minutes, Film.rating, Film.active]
    column_searchable_list = [Film.title]
    column_sortable_list = [Film.title, Film.duration_minutes]
    # Catalog writes go through the API so runtime and screening checks apply
    can_create = False
    can_edit = False
    can_delete = False


class RoomAdmin(ModelView, model=Room):
    column_list = [
        Room.id,
        Room.number,
        Room.name,
        Room.room_type,
        Room.capacity,
        Room.surcharge,
        Room.active,
    ]
    column_searchable_list = [Room.name]
    column_sortable_list = [Room.number, Room.capacity]
    can_create = False
    can_edit = False
    can_delete = False


class CustomerAdmin(ModelView, model=Customer):
    column_list = [Customer.id, Customer.name, Customer.email, Customer.active]
    column_searchable_list = [Customer.name, Customer.email]
    can_create = False
    can_edit = False
    can_delete = False


class ScreeningAdmin(ModelView, model=Screening):
    column_list = [
        Screening.id,
        Screening.film_id,
        Screening.room_id,
        Screening.starts_at,
        Screening.ends_at,
        Screening.base_price,
        Screening.seats_available,
        Screening.seats_reserved,
        Screening.active,
    ]
    column_sortable_list = [Screening.starts_at]
    can_create = False
    can_edit = False
    can_delete = False


class ReservationAdmin(ModelView, model=Reservation):
    column_list = [
        Reservation.id,
        Reservation.code,
        Reservation.customer_id,
        Reservation.screening_id,
        Reservation.quantity,
        Reservation.total,
        Reservation.status,
        Reservation.expires_at,
    ]
    column_searchable_list = [Reservation.code]
    column_sortable_list = [Reservation.created_at, Reservation.status]
    can_create = False
    can_edit = False
    can_delete = False


_TOOLS_TEMPLATE = """\
{% extends "sqladmin/layout.html" %}
{% block content %}
<div class="container-fluid p-4">
  <h2>Reservation Tools</h2>
  <form method="post" class="mt-3 d-flex align-items-center gap-2 flex-wrap">
    <button name="action" value="expire" class="btn btn-primary">Expire Overdue Holds Now</button>
  </form>
  {% if message %}
  <div class="alert alert-success mt-3">{{ message }}</div>
  {% endif %}
</div>
{% endblock %}
"""


class ReservationToolsView(BaseView):
    name = "Tools"
    icon = "fa-wrench"

    @expose("/tools", methods=["GET", "POST"])
    async def tools(self, request: Request) -> HTMLResponse:
        message: str | None = None

        if request.method == "POST":
            form = await request.form()
            if form.get("action") == "expire":
                async with AsyncSessionLocal() as db:
                    expired = await expire_overdue_reservations(db, utcnow())
                    await db.commit()
                message = f"{expired} overdue reservations expired."

        tmpl = self.templates.env.from_string(_TOOLS_TEMPLATE)
        content = await tmpl.render_async(request=request, message=message)
        return HTMLResponse(content)
