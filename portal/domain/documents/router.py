"""Document router - n8n webhook for document metadata"""

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ...webhook_security import WebhookError, parse_webhook_json, verify_n8n_webhook
from .schemas import DocumentWebhookRequest
from .service import DocumentWebhookService

router = APIRouter(prefix="/n8n", tags=["n8n Webhooks"])

documents_rate_limit = create_rate_limiter(limit=120, window_seconds=60, key_prefix="n8n_docs")


def get_document_service(db: Session = Depends(get_db)) -> DocumentWebhookService:
    """Dependency injection for DocumentWebhookService"""
    return DocumentWebhookService(db)


@router.post("/documents", dependencies=[Depends(documents_rate_limit)])
async def documents_webhook(
    raw_body: bytes = Depends(verify_n8n_webhook),
    service: DocumentWebhookService = Depends(get_document_service),
):
    """Create, update, delete, list documents or get a download URL (x-n8n-signature)"""
    try:
        payload = DocumentWebhookRequest.model_validate(parse_webhook_json(raw_body))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise WebhookError(400, f"Invalid {field}: {first['msg']}") from e

    return service.handle(payload)
