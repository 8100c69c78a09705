"""Document service - Document metadata actions requested by n8n workflows"""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Document, User
from ...utils import document_storage
from ...webhook_security import WebhookError
from .repository import DocumentRepository
from .schemas import DocumentData, DocumentWebhookRequest

logger = logging.getLogger(__name__)


def serialize_document(document: Document) -> dict:
    return {
        "id": document.id,
        "user_id": document.user_id,
        "name": document.name,
        "file_path": document.file_path,
        "file_type": document.file_type,
        "file_size": document.file_size,
        "folder": document.folder,
        "tags": document.tags or [],
        "created_at": document.created_at.isoformat() if document.created_at else None,
    }


class DocumentWebhookService:
    """Service layer for the n8n documents webhook"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DocumentRepository()

    def handle(self, payload: DocumentWebhookRequest) -> dict:
        handlers = {
            "create": self.create,
            "update": self.update,
            "delete": self.delete,
            "list": self.list_documents,
            "get-download-url": self.get_download_url,
        }
        handler = handlers.get(payload.action or "")
        if handler is None:
            raise WebhookError(400, f"Unknown action: {payload.action}")

        try:
            return handler(payload)
        except WebhookError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error in n8n documents ({payload.action}): {e}")
            raise WebhookError(500, str(e)) from e

    def _get_or_404(self, document_id: Optional[int]) -> Document:
        if document_id is None:
            raise WebhookError(400, "Missing document_id")
        document = self.repo.get_by_id(self.db, document_id)
        if not document:
            raise WebhookError(404, f"Document not found: {document_id}")
        return document

    def create(self, payload: DocumentWebhookRequest) -> dict:
        data = payload.data or DocumentData()
        if not payload.user_id or not data.name or not data.file_path:
            raise WebhookError(400, "Missing required fields: user_id, name, file_path")
        if not self.db.query(User.id).filter(User.id == payload.user_id).first():
            raise WebhookError(404, f"User not found: {payload.user_id}")

        document = self.repo.add(
            self.db,
            user_id=payload.user_id,
            name=data.name,
            file_path=data.file_path,
            file_type=data.file_type,
            file_size=data.file_size,
            folder=data.folder or "/",
            tags=data.tags or [],
        )
        self.db.commit()
        self.db.refresh(document)

        logger.info(f"Document created: {document.id}")
        return {"success": True, "document": serialize_document(document)}

    def update(self, payload: DocumentWebhookRequest) -> dict:
        document = self._get_or_404(payload.document_id)
        data = payload.data or DocumentData()

        if data.name:
            document.name = data.name
        if "folder" in data.model_fields_set and data.folder is not None:
            document.folder = data.folder
        if data.tags:
            document.tags = data.tags

        self.db.commit()
        self.db.refresh(document)

        logger.info(f"Document updated: {document.id}")
        return {"success": True, "document": serialize_document(document)}

    def delete(self, payload: DocumentWebhookRequest) -> dict:
        document = self._get_or_404(payload.document_id)

        # The row goes even when the object could not be removed from storage
        if document.file_path:
            document_storage.delete_document_object(document.file_path)

        self.repo.delete(self.db, document)
        self.db.commit()

        logger.info(f"Document deleted: {payload.document_id}")
        return {"success": True, "deleted": payload.document_id}

    def list_documents(self, payload: DocumentWebhookRequest) -> dict:
        filters = payload.filters
        documents = self.repo.list_documents(
            self.db,
            user_id=payload.user_id,
            folder=filters.folder if filters else None,
            file_type=filters.file_type if filters else None,
            search=filters.search if filters else None,
        )

        logger.info(f"Listed documents: {len(documents)}")
        return {
            "success": True,
            "documents": [serialize_document(d) for d in documents],
            "count": len(documents),
        }

    def get_download_url(self, payload: DocumentWebhookRequest) -> dict:
        document = self._get_or_404(payload.document_id)

        try:
            url = document_storage.generate_download_url(document.file_path)
        except (BotoCoreError, ClientError) as e:
            raise WebhookError(500, str(e)) from e

        logger.info(f"Generated download URL for: {document.id}")
        return {
            "success": True,
            "document_id": document.id,
            "name": document.name,
            "download_url": url,
            "expires_in": document_storage.PRESIGNED_URL_EXPIRATION,
        }
