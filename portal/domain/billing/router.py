"""Billing router - FastAPI endpoints for billing operations"""

from fastapi import APIRouter, Depends, Request

from ...auth import get_current_user
from ...models import User
from .schemas import CheckoutRequest, CheckoutResponse
from .service import CheckoutService

router = APIRouter(prefix="/billing", tags=["Billing"])


def get_checkout_service() -> CheckoutService:
    """Dependency injection for CheckoutService"""
    return CheckoutService()


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout_session(
    body: CheckoutRequest,
    request: Request,
    user: User = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Start checkout for the setup fee and the subscription with a 30 day trial"""
    url = await service.create_checkout(body, user, origin=request.headers.get("origin"))
    return CheckoutResponse(url=url)
