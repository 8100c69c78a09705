import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["Account"])


def generate_api_key() -> str:
    return secrets.token_urlsafe(32)


@router.get("/api-key")
async def get_api_key(current_user: User = Depends(get_current_user)):
    """Show the key n8n workflows use to act for this account"""
    return {"api_key": current_user.api_key}


@router.post("/api-key")
async def rotate_api_key(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Issue a new API key; the previous key stops working immediately"""
    current_user.api_key = generate_api_key()
    try:
        db.commit()
        db.refresh(current_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to rotate API key for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate API key") from e

    logger.info(f"API key rotated for user {current_user.id}")
    return {"api_key": current_user.api_key}
