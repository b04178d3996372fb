"""Seed script to populate rooms, films and a demo customer."""

import asyncio
from decimal import Decimal

from sqlalchemy import select

from boxoffice.database import AsyncSessionLocal
from boxoffice.models.customer import Customer
from boxoffice.models.film import Film
from boxoffice.models.room import Room, RoomType

ROOMS = [
    {
        "number": 1,
        "name": "Main Hall",
        "room_type": RoomType.STANDARD,
        "rows": 10,
        "seats_per_row": 10,
        "surcharge": Decimal("0.00"),
        "equipment": {"dolby_atmos": False, "3d": True},
    },
    {
        "number": 2,
        "name": "Premium Lounge",
        "room_type": RoomType.PREMIUM,
        "rows": 6,
        "seats_per_row": 8,
        "surcharge": Decimal("3.50"),
        "equipment": {"dolby_atmos": True, "recliners": True},
    },
    {
        "number": 3,
        "name": "IMAX",
        "room_type": RoomType.IMAX,
        "rows": 15,
        "seats_per_row": 20,
        "surcharge": Decimal("5.00"),
        "equipment": {"imax_laser": True, "3d": True},
    },
]

FILMS = [
    {"title": "The Long Night", "duration_minutes": 120, "rating": "PG-13"},
    {"title": "Paper Moons", "duration_minutes": 95, "rating": "PG"},
    {"title": "Harbour Lights", "duration_minutes": 142, "rating": "R"},
]

CUSTOMERS = [
    {"name": "Demo Customer", "email": "demo@example.com"},
]


async def seed_catalog() -> None:
    """Seed the database with rooms, films and a demo customer, skipping existing rows."""
    async with AsyncSessionLocal() as session:
        for room_data in ROOMS:
            result = await session.execute(select(Room).where(Room.number == room_data["number"]))
            if result.scalar_one_or_none():
                print(f"Room {room_data['number']} already exists, skipping")
                continue
            capacity = room_data["rows"] * room_data["seats_per_row"]
            session.add(Room(capacity=capacity, active=True, **room_data))
            print(f"Added room: {room_data['name']} ({capacity} seats)")

        for film_data in FILMS:
            result = await session.execute(select(Film).where(Film.title == film_data["title"]))
            if result.scalars().first():
                print(f"Film {film_data['title']!r} already exists, skipping")
                continue
            session.add(Film(active=True, **film_data))
            print(f"Added film: {film_data['title']}")

        for customer_data in CUSTOMERS:
            result = await session.execute(
                select(Customer).where(Customer.email == customer_data["email"])
            )
            if result.scalar_one_or_none():
                print(f"Customer {customer_data['email']} already exists, skipping")
                continue
            session.add(Customer(active=True, **customer_data))
            print(f"Added customer: {customer_data['email']}")

        await session.commit()
        print("Catalogue seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_catalog())
