"""Customer registry."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.exceptions import Conflict, NotFound
from boxoffice.models.customer import Customer

logger = logging.getLogger(__name__)


async def get_customer(db: AsyncSession, customer_id: int) -> Customer:
    """Load a customer or raise NotFound."""
    customer = await db.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Customer", customer_id)
    return customer


async def create_customer(db: AsyncSession, name: str, email: str) -> Customer:
    """Register a customer. Emails are unique, compared case-insensitively."""
    email = email.strip().lower()
    result = await db.execute(select(Customer.id).where(Customer.email == email))
    if result.scalar_one_or_none() is not None:
        raise Conflict(f"A customer with email {email} already exists")

    customer = Customer(name=name, email=email, active=True)
    db.add(customer)
    await db.flush()
    logger.info(f"Registered customer {email}")
    return customer


async def deactivate_customer(db: AsyncSession, customer_id: int) -> Customer:
    """Stop a customer from making new reservations. Existing ones are untouched."""
    customer = await get_customer(db, customer_id)
    customer.active = False
    await db.flush()
    logger.info(f"Deactivated customer {customer_id}")
    return customer
