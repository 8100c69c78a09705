import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import Product, StaffMember, User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Staff & Products"])


class StaffMemberCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class StaffMemberResponse(BaseModel):
    id: int
    name: str
    is_active: bool


class ProductCreate(BaseModel):
    name: str
    price: float = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Price cannot be negative")
        return v


class ProductResponse(BaseModel):
    id: int
    name: str
    price: float


# ============================================================================
# STAFF MEMBERS
# ============================================================================


@router.get("/staff-members", response_model=list[StaffMemberResponse])
async def get_staff_members(
    include_inactive: Optional[bool] = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(StaffMember).filter(StaffMember.user_id == current_user.id)
    if not include_inactive:
        query = query.filter(StaffMember.is_active.is_(True))
    return [
        StaffMemberResponse(id=s.id, name=s.name, is_active=s.is_active)
        for s in query.order_by(StaffMember.name).all()
    ]


@router.post("/staff-members", response_model=StaffMemberResponse, status_code=201)
async def create_staff_member(
    data: StaffMemberCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    staff_member = StaffMember(user_id=current_user.id, name=data.name)
    db.add(staff_member)
    db.commit()
    db.refresh(staff_member)
    logger.info(f"Staff member {staff_member.id} created for user {current_user.id}")
    return StaffMemberResponse(
        id=staff_member.id, name=staff_member.name, is_active=staff_member.is_active
    )


@router.delete("/staff-members/{staff_member_id}")
async def deactivate_staff_member(
    staff_member_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate a staff member; existing reservations keep their assignment"""
    staff_member = (
        db.query(StaffMember)
        .filter(StaffMember.id == staff_member_id, StaffMember.user_id == current_user.id)
        .first()
    )
    if not staff_member:
        raise HTTPException(status_code=404, detail="Staff member not found")

    staff_member.is_active = False
    db.commit()
    return {"message": "Staff member deactivated"}


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=list[ProductResponse])
async def get_products(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    products = (
        db.query(Product).filter(Product.user_id == current_user.id).order_by(Product.name).all()
    )
    return [ProductResponse(id=p.id, name=p.name, price=p.price) for p in products]


@router.post("/products", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = Product(user_id=current_user.id, name=data.name, price=data.price)
    db.add(product)
    db.commit()
    db.refresh(product)
    return ProductResponse(id=product.id, name=product.name, price=product.price)
