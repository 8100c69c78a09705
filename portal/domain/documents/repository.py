"""Document repository - Database operations for document metadata"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Document


class DocumentRepository:
    """Repository for document database operations"""

    @staticmethod
    def get_by_id(db: Session, document_id: int) -> Optional[Document]:
        return db.query(Document).filter(Document.id == document_id).first()

    @staticmethod
    def list_documents(
        db: Session,
        user_id: Optional[int] = None,
        folder: Optional[str] = None,
        file_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Document]:
        query = db.query(Document)
        if user_id is not None:
            query = query.filter(Document.user_id == user_id)
        if folder:
            query = query.filter(Document.folder == folder)
        if file_type:
            query = query.filter(Document.file_type == file_type)
        if search:
            query = query.filter(func.lower(Document.name).like(f"%{search.lower()}%"))
        return query.order_by(Document.created_at.desc(), Document.id.desc()).all()

    @staticmethod
    def add(db: Session, **document_data) -> Document:
        document = Document(**document_data)
        db.add(document)
        db.flush()
        return document

    @staticmethod
    def delete(db: Session, document: Document) -> None:
        db.delete(document)
