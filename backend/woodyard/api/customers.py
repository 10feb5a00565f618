"""Customer CRUD - ADMIN only"""
import io

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.core.auth import RequireAdmin
from woodyard.database import get_db
from woodyard.models import Customer, DeliveryStop, User
from woodyard.schemas.customer import (
    CustomerCreate,
    CustomerResponse,
    CustomerSearchHit,
    CustomerUpdate,
)
from woodyard.services.customer_search import search_customers

router = APIRouter(prefix="/api/customers", tags=["customers"])

EXCEL_HEADERS = ["Name", "Type", "Phone", "Email", "Street", "City", "State", "ZIP", "Address", "Notes"]


@router.get("", response_model=list[CustomerResponse])
def list_customers(
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    return list(db.execute(select(Customer).order_by(Customer.name)).scalars().all())


@router.get("/search", response_model=list[CustomerSearchHit])
def search(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    """Fuzzy match on name, phone, email and address"""
    return [
        CustomerSearchHit(customer=CustomerResponse.model_validate(m.customer), score=m.score)
        for m in search_customers(q, db, limit=limit)
    ]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    customer = Customer(**data.model_dump())
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/export/excel")
def export_customers_excel(
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    customers = list(db.execute(select(Customer).order_by(Customer.name)).scalars().all())
    wb = Workbook()
    ws = wb.active
    ws.title = "Customers"
    ws.append(EXCEL_HEADERS)
    for c in customers:
        ws.append([
            c.name or "",
            c.type or "",
            c.phone or "",
            c.email or "",
            c.street_address or "",
            c.city or "",
            c.state or "",
            c.zip_code or "",
            c.address or "",
            c.notes or "",
        ])
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=customers.xlsx"},
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(customer, k, v)
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    in_use = db.execute(
        select(DeliveryStop.id).where(DeliveryStop.customer_id == customer_id).limit(1)
    ).first()
    if in_use:
        raise HTTPException(status_code=400, detail="Customer has delivery stops and cannot be deleted")
    db.delete(customer)
    db.commit()
