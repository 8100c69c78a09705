"""Dodo Payments service - Integration with Dodo Payments API"""

import logging
from typing import Optional

from dodopayments import AsyncDodoPayments  # type: ignore

from ... import config

logger = logging.getLogger(__name__)


def normalize_dodo_environment(env: Optional[str]) -> str:
    """Normalize Dodo environment value to expected format"""
    value = (env or "test_mode").strip().lower()
    if value in {"live", "production", "prod"}:
        return "live_mode"
    if value in {"test", "sandbox", "staging", "dev", "development"}:
        return "test_mode"
    if value in {"test_mode", "live_mode"}:
        return value
    logger.warning(f"Unknown DODO environment '{env}', defaulting to test_mode")
    return "test_mode"


class DodoPaymentsService:
    """Service for Dodo Payments API operations"""

    def __init__(self, api_key: Optional[str] = None, environment: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.DODO_PAYMENTS_API_KEY
        self.environment = normalize_dodo_environment(
            environment or config.DODO_PAYMENTS_ENVIRONMENT
        )
        self.client = None

        if not self.api_key:
            logger.warning(
                "DODO_PAYMENTS_API_KEY not set; billing endpoints will fail until configured"
            )
        else:
            self.client = AsyncDodoPayments(
                bearer_token=self.api_key,
                environment=self.environment,
            )
            logger.info(f"Dodo Payments client initialized (env={self.environment})")

    def is_available(self) -> bool:
        """Check if Dodo Payments client is available"""
        return self.client is not None

    async def create_checkout_session(
        self,
        product_cart: list[dict],
        customer: dict,
        return_url: str,
        metadata: dict,
        trial_period_days: Optional[int] = None,
    ):
        """Create a hosted checkout session"""
        if not self.client:
            raise RuntimeError("Dodo Payments client not initialized")

        params = {
            "product_cart": product_cart,
            "customer": customer,
            "return_url": return_url,
            "metadata": metadata,
        }
        if trial_period_days:
            params["subscription_data"] = {"trial_period_days": trial_period_days}

        try:
            return await self.client.checkout_sessions.create(**params)
        except Exception as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise


dodo_service = DodoPaymentsService()
