"""Contact service - CSV import and listing of customer contacts"""

import csv
import logging
import re
from datetime import datetime
from io import StringIO
from typing import Optional

from dateutil import parser as date_parser
from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import User
from ...utils.sanitization import clean_text
from .repository import ContactRepository
from .schemas import ContactImportResult

logger = logging.getLogger(__name__)

IMPORT_BATCH_SIZE = 100
LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")

TEMPLATE_HEADER = [
    "Name",
    "Vorname",
    "Nachname",
    "Telefon",
    "Email",
    "Info",
    "Einwilligungsstatus",
    "Geschlecht",
    "Sprache",
    "Geburtsdatum",
    "Geburtsmonat",
    "Geburstag",
    "Anzahl der Buchungen",
    "Erstellt",
]
TEMPLATE_EXAMPLE = [
    "Max Mustermann",
    "Max",
    "Mustermann",
    "+49 123 456789",
    "max@example.com",
    "Stammkunde",
    "J",
    "M",
    "DE",
    "1990-01-15",
    "1",
    "15",
    "5",
    "2024-01-01 10:00:00",
]

# column -> predicate on the lower-cased header
COLUMN_MATCHERS = {
    "name": lambda h: h == "name",
    "first_name": lambda h: h == "vorname",
    "last_name": lambda h: h == "nachname",
    "phone": lambda h: h == "telefon",
    "email": lambda h: h == "email",
    "info": lambda h: h == "info",
    "consent_status": lambda h: "einwilligung" in h,
    "gender": lambda h: h == "geschlecht",
    "booking_count": lambda h: "buchung" in h,
    "original_created_at": lambda h: h == "erstellt",
}

TEXT_LIMITS = {
    "name": 255,
    "first_name": 255,
    "last_name": 255,
    "phone": 50,
    "email": 255,
    "info": 5000,
    "consent_status": 50,
    "gender": 20,
}


def map_columns(header: list[str]) -> dict[str, int]:
    """Index of the first header matching each known column"""
    normalized = [h.replace('"', "").replace("\ufeff", "").strip().lower() for h in header]
    columns = {}
    for field, matches in COLUMN_MATCHERS.items():
        for index, name in enumerate(normalized):
            if matches(name):
                columns[field] = index
                break
    return columns


def parse_booking_count(value: Optional[str]) -> int:
    """Leading integer of the cell ("5 Buchungen" -> 5), 0 when there is none"""
    match = LEADING_INTEGER.match(value or "")
    return int(match.group(1)) if match else 0


def parse_created_at(value: Optional[str]) -> Optional[datetime]:
    if not value or not value.strip():
        return None
    try:
        return date_parser.parse(value.strip())
    except (ValueError, OverflowError):
        logger.debug(f"Ignoring unparseable Erstellt value: {value!r}")
        return None


def parse_contacts_csv(text: str) -> list[dict]:
    """
    Parse an exported customer list.

    Headers are matched case-insensitively; rows without a name are skipped.
    Comma and semicolon separated files are accepted.
    """
    text = text.strip()
    if not text:
        return []

    first_line = text.splitlines()[0]
    delimiter = ";" if first_line.count(";") > first_line.count(",") else ","
    rows = list(csv.reader(StringIO(text), delimiter=delimiter))
    if len(rows) < 2:
        return []

    columns = map_columns(rows[0])
    if "name" not in columns:
        return []

    def cell(values: list[str], field: str) -> Optional[str]:
        index = columns.get(field)
        if index is None or index >= len(values):
            return None
        return values[index].replace('"', "")

    contacts = []
    for values in rows[1:]:
        if not any(v.strip() for v in values):
            continue

        name = (cell(values, "name") or "").strip()
        if not name:
            continue

        contact = {field: cell(values, field) for field in TEXT_LIMITS}
        for field, limit in TEXT_LIMITS.items():
            value = contact[field]
            # Over-long cells are truncated rather than failing the whole import
            contact[field] = clean_text(value[:limit] if value else value, max_length=limit)
        contact["booking_count"] = parse_booking_count(cell(values, "booking_count"))
        contact["original_created_at"] = parse_created_at(cell(values, "original_created_at"))
        contacts.append(contact)

    return contacts


class ContactService:
    """Service layer for contact business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContactRepository()

    def search_contacts(self, user: User, search: Optional[str] = None):
        return self.repo.search_contacts(self.db, user.id, search.strip() if search else None)

    def import_csv(self, user: User, text: str) -> ContactImportResult:
        """Insert parsed contacts in batches; a failing batch does not stop the others"""
        contacts = parse_contacts_csv(text)
        if not contacts:
            raise HTTPException(status_code=400, detail="Keine gültigen Daten in der CSV gefunden")

        logger.info(f"📥 Importing {len(contacts)} contacts for user {user.id}")

        success = 0
        failed = 0
        errors: list[str] = []

        for start in range(0, len(contacts), IMPORT_BATCH_SIZE):
            batch = contacts[start : start + IMPORT_BATCH_SIZE]
            batch_number = start // IMPORT_BATCH_SIZE + 1
            try:
                self.repo.insert_batch(self.db, user.id, batch)
                success += len(batch)
            except SQLAlchemyError as e:
                self.db.rollback()
                failed += len(batch)
                errors.append(f"Batch {batch_number}: {e}")
                logger.error(f"❌ Contact import batch {batch_number} failed for user {user.id}: {e}")

        logger.info(f"✅ Contact import finished for user {user.id}: {success} ok, {failed} failed")
        return ContactImportResult(success=success, failed=failed, errors=errors)

    def delete_all(self, user: User) -> int:
        deleted = self.repo.delete_all(self.db, user.id)
        logger.info(f"Deleted {deleted} contacts for user {user.id}")
        return deleted

    @staticmethod
    def template_csv() -> StreamingResponse:
        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(TEMPLATE_HEADER)
        writer.writerow(TEMPLATE_EXAMPLE)
        output.seek(0)

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv; charset=utf-8",
            headers={
                "Content-Disposition": "attachment; filename=kunden_vorlage.csv",
                "Cache-Control": "no-cache",
            },
        )
