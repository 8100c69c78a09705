from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import Notification, User

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationItem(BaseModel):
    id: int
    title: str
    message: str
    type: str
    link: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationsResponse(BaseModel):
    unread_count: int
    notifications: list[NotificationItem]


class MarkReadRequest(BaseModel):
    # Empty or missing marks everything read
    ids: Optional[list[int]] = None


@router.get("", response_model=NotificationsResponse)
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest 50 notifications and the unread count"""
    notifications = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(50)
        .all()
    )
    unread_count = (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .scalar()
    )

    return NotificationsResponse(
        unread_count=unread_count or 0,
        notifications=[
            NotificationItem(
                id=n.id,
                title=n.title,
                message=n.message,
                type=n.type,
                link=n.link,
                is_read=n.is_read,
                created_at=n.created_at,
            )
            for n in notifications
        ],
    )


@router.post("/mark-read")
async def mark_notifications_read(
    body: Optional[MarkReadRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark notifications as read"""
    query = db.query(Notification).filter(
        Notification.user_id == current_user.id, Notification.is_read.is_(False)
    )
    if body and body.ids:
        query = query.filter(Notification.id.in_(body.ids))

    updated = query.update({Notification.is_read: True}, synchronize_session=False)
    db.commit()

    return {"message": "Notifications marked as read", "updated": updated}
