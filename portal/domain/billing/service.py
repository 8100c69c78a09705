"""Checkout service - One-time setup fee plus trial subscription"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta
from fastapi import HTTPException

from ... import config
from ...models import User
from .dodo_service import DodoPaymentsService, dodo_service
from .schemas import CheckoutRequest

logger = logging.getLogger(__name__)


def minimum_contract_end(
    now: datetime,
    trial_days: int = config.CHECKOUT_TRIAL_DAYS,
    contract_months: int = config.MIN_CONTRACT_MONTHS,
) -> datetime:
    """The subscription starts after the trial; the minimum term runs from there"""
    return now + timedelta(days=trial_days) + relativedelta(months=contract_months)


class CheckoutService:
    """Service for creating checkout sessions"""

    def __init__(self, payments: Optional[DodoPaymentsService] = None):
        self.payments = payments or dodo_service

    async def create_checkout(
        self,
        request: CheckoutRequest,
        user: User,
        origin: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Create the checkout session and return its hosted URL"""
        if not self.payments.is_available():
            raise HTTPException(status_code=503, detail="Billing service temporarily unavailable")

        now = now or datetime.now(timezone.utc)
        base_url = (origin or config.FRONTEND_URL).rstrip("/")
        tier_name = request.tier_name or config.DEFAULT_TIER_NAME

        if user.dodo_customer_id:
            customer = {"customer_id": user.dodo_customer_id}
            logger.info(f"Existing customer found: {user.dodo_customer_id}")
        else:
            customer = {"email": user.email, "name": user.full_name or user.email}

        metadata = {
            "user_id": str(user.id),
            "min_contract_months": str(config.MIN_CONTRACT_MONTHS),
            "min_contract_end": minimum_contract_end(now).isoformat(),
            "tier_name": tier_name,
            "setup_paid": "true",
        }

        try:
            session = await self.payments.create_checkout_session(
                product_cart=[
                    # One-time setup fee, charged now
                    {"product_id": request.setup_price_id, "quantity": 1},
                    # Monthly subscription, first charge after the trial
                    {"product_id": request.subscription_price_id, "quantity": 1},
                ],
                customer=customer,
                return_url=f"{base_url}/portal/subscriptions?success=true",
                metadata=metadata,
                trial_period_days=config.CHECKOUT_TRIAL_DAYS,
            )
        except Exception as e:
            logger.error(f"Failed to create checkout session for user {user.id}: {e}")
            raise HTTPException(status_code=500, detail=str(e)) from e

        url = getattr(session, "checkout_url", None)
        if not url:
            logger.error(f"Checkout session for user {user.id} returned no URL")
            raise HTTPException(status_code=500, detail="Payment provider returned no checkout URL")

        logger.info(
            f"✅ Checkout session created for user {user.id}: {getattr(session, 'session_id', None)}"
        )
        return url
