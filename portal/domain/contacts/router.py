"""Contact router - FastAPI endpoints for the customer list"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ContactImportResult, ContactListResponse, ContactResponse
from .service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])

MAX_IMPORT_BYTES = 5 * 1024 * 1024


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    """Dependency injection for ContactService"""
    return ContactService(db)


@router.get("", response_model=ContactListResponse)
async def get_contacts(
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """First 100 contacts by name, optionally filtered by name, phone or email"""
    total, contacts = service.search_contacts(current_user, search)
    return ContactListResponse(
        total=total,
        contacts=[
            ContactResponse(
                id=c.id,
                name=c.name,
                first_name=c.first_name,
                last_name=c.last_name,
                phone=c.phone,
                email=c.email,
                info=c.info,
                consent_status=c.consent_status,
                gender=c.gender,
                booking_count=c.booking_count or 0,
                original_created_at=c.original_created_at,
                created_at=c.created_at,
            )
            for c in contacts
        ],
    )


@router.get("/template")
async def download_template():
    """CSV template with the expected German column headers"""
    return ContactService.template_csv()


@router.post("/import", response_model=ContactImportResult)
async def import_contacts(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """Import contacts from an exported CSV file"""
    content = await file.read()
    if len(content) > MAX_IMPORT_BYTES:
        raise HTTPException(status_code=413, detail="CSV file too large (max 5MB)")

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Excel exports are often Latin-1
        text = content.decode("latin-1")

    return service.import_csv(current_user, text)


@router.delete("")
async def delete_all_contacts(
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    """Delete every contact of the current account"""
    deleted = service.delete_all(current_user)
    return {"message": "Contacts deleted", "deleted": deleted}
