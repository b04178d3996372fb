"""Customers API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.database import get_db, run_with_retries
from boxoffice.models.customer import Customer
from boxoffice.schemas.customer import CustomerCreate, CustomerResponse
from boxoffice.services import customers

router = APIRouter()


@router.post("/customers", response_model=CustomerResponse, status_code=201)
async def create_customer(request: CustomerCreate, db: AsyncSession = Depends(get_db)) -> Customer:
    return await run_with_retries(
        db, lambda: customers.create_customer(db, request.name, request.email)
    )


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: int, db: AsyncSession = Depends(get_db)) -> Customer:
    return await customers.get_customer(db, customer_id)


@router.post("/customers/{customer_id}/deactivate", response_model=CustomerResponse)
async def deactivate_customer(customer_id: int, db: AsyncSession = Depends(get_db)) -> Customer:
    """Block a customer from booking. Their existing reservations are kept."""
    return await run_with_retries(db, lambda: customers.deactivate_customer(db, customer_id))
