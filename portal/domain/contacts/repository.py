"""Contact repository - Database operations for contacts"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import Contact


class ContactRepository:
    """Repository for contact database operations"""

    @staticmethod
    def search_contacts(
        db: Session, user_id: int, search: Optional[str] = None, limit: int = 100
    ) -> tuple[int, list[Contact]]:
        """Total matching count and the first `limit` contacts ordered by name"""
        query = db.query(Contact).filter(Contact.user_id == user_id)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Contact.name).like(pattern),
                    func.lower(Contact.phone).like(pattern),
                    func.lower(Contact.email).like(pattern),
                )
            )
        total = query.count()
        return total, query.order_by(Contact.name).limit(limit).all()

    @staticmethod
    def insert_batch(db: Session, user_id: int, rows: list[dict]) -> None:
        db.add_all([Contact(user_id=user_id, **row) for row in rows])
        db.commit()

    @staticmethod
    def delete_all(db: Session, user_id: int) -> int:
        deleted = (
            db.query(Contact).filter(Contact.user_id == user_id).delete(synchronize_session=False)
        )
        db.commit()
        return deleted
