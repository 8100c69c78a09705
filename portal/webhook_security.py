"""
Webhook Security Module

Verification for requests coming from the n8n workflow tool:
- Constant-time comparison of the shared secret (prevents timing attacks)
- Optional HMAC-SHA256 body signatures ("sha256=<hex>")
- Detailed logging for security auditing
"""

import hashlib
import hmac
import json
import logging
from typing import Optional

from fastapi import Request

from . import config

logger = logging.getLogger(__name__)

N8N_SIGNATURE_HEADER = "x-n8n-signature"


class WebhookError(Exception):
    """
    Error returned to n8n as {"error": ..., "code": ...}.

    n8n workflows branch on these fields, so webhook routes raise this
    instead of HTTPException (whose body is {"detail": ...}).
    """

    def __init__(self, status_code: int, error: str, code: Optional[str] = None, **extra):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.code = code
        self.extra = extra

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.code:
            body["code"] = self.code
        body.update(self.extra)
        return body


def constant_time_compare(a: Optional[str], b: Optional[str]) -> bool:
    """
    Compare two strings in constant time to prevent timing attacks.
    Uses hmac.compare_digest which is designed for this purpose.
    """
    if not a or not b:
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def is_valid_n8n_signature(signature: Optional[str], secret: Optional[str], raw_body: bytes) -> bool:
    """
    Check an x-n8n-signature header value.

    n8n's header auth sends the shared secret itself; workflows that sign
    the body send "sha256=<hex digest>" instead. Both are accepted.
    """
    if not secret or not signature:
        return False

    if signature.startswith("sha256="):
        expected = f"sha256={compute_hmac_sha256(secret, raw_body)}"
        return constant_time_compare(expected, signature)

    return constant_time_compare(secret, signature)


async def verify_n8n_webhook(request: Request) -> bytes:
    """
    FastAPI dependency guarding the n8n CRUD webhooks.

    Returns the raw body so handlers can parse it after verification.

    Raises:
        WebhookError: 401 if the secret is not configured or does not match
    """
    raw_body = await request.body()
    signature = request.headers.get(N8N_SIGNATURE_HEADER)

    if not config.N8N_WEBHOOK_SECRET:
        logger.error("N8N_WEBHOOK_SECRET not configured - rejecting n8n webhook")
        raise WebhookError(401, "Unauthorized")

    if not is_valid_n8n_signature(signature, config.N8N_WEBHOOK_SECRET, raw_body):
        logger.error(
            f"Unauthorized request to {request.url.path} - invalid or missing n8n signature"
        )
        raise WebhookError(401, "Unauthorized")

    logger.debug(f"n8n webhook signature verified for {request.url.path}")
    return raw_body


def parse_webhook_json(raw_body: bytes) -> dict:
    """
    Decode a verified webhook body.

    Raises:
        WebhookError: 400 if the body is not a JSON object
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WebhookError(400, "Invalid JSON body", "VALIDATION_ERROR") from e
    if not isinstance(payload, dict):
        raise WebhookError(400, "Request body must be a JSON object", "VALIDATION_ERROR")
    return payload
