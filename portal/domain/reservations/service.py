"""Reservation service - Booking requests coming from n8n workflows"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import config
from ...models import Reservation, User
from ...shared.validators import format_time_of_day, parse_reservation_date, parse_time_of_day
from ...utils.sanitization import clean_text, sanitize_string
from ...webhook_security import WebhookError
from .repository import ReservationRepository
from .schemas import ReservationCreatedResponse, ReservationWebhookRequest
from .slots import ExistingBooking, SchedulingPolicy, check_slot, resolve_staff_member

logger = logging.getLogger(__name__)


def to_existing_booking(reservation: Reservation) -> Optional[ExistingBooking]:
    try:
        start = parse_time_of_day(reservation.reservation_time)
        end = parse_time_of_day(reservation.end_time) if reservation.end_time else None
    except ValueError:
        logger.warning(
            f"Skipping reservation {reservation.id} with unparseable times "
            f"{reservation.reservation_time!r}-{reservation.end_time!r}"
        )
        return None
    return ExistingBooking(
        start_time=start,
        end_time=end,
        staff_member_id=reservation.staff_member_id,
        booking_date=reservation.reservation_date,
    )


def occupied_message(requested_time: str, requested_date: str, staff_name: Optional[str]) -> str:
    if staff_name:
        return f"{staff_name} hat um {requested_time} Uhr am {requested_date} bereits einen Termin."
    return f"Der Termin um {requested_time} Uhr am {requested_date} ist bereits belegt."


def alternatives_message(slots: list[str], staff_name: Optional[str]) -> str:
    if not slots:
        return "An diesem Tag sind leider keine Termine mehr frei."
    for_staff = f" für {staff_name}" if staff_name else ""
    return f"Verfügbare Zeiten{for_staff}: " + ", ".join(f"{slot} Uhr" for slot in slots)


class ReservationService:
    """Service layer for reservation booking"""

    def __init__(self, db: Session, policy: Optional[SchedulingPolicy] = None):
        self.db = db
        self.repo = ReservationRepository()
        self.policy = policy or SchedulingPolicy.from_config()

    def create_from_webhook(
        self, account: User, payload: ReservationWebhookRequest
    ) -> ReservationCreatedResponse:
        """
        Validate, check for conflicts and store a reservation.

        Raises:
            WebhookError: 400 VALIDATION_ERROR, 409 TIME_SLOT_OCCUPIED or 500 INTERNAL_ERROR
        """
        missing = payload.missing_required_fields()
        if missing:
            raise WebhookError(
                400,
                "Missing required fields: customer_name, reservation_date, reservation_time",
                "VALIDATION_ERROR",
            )

        try:
            day = parse_reservation_date(payload.reservation_date)
            start = parse_time_of_day(payload.reservation_time)
            customer_name = clean_text(payload.customer_name, max_length=255)
            customer_phone = clean_text(payload.customer_phone, max_length=50)
            customer_email = clean_text(payload.customer_email, max_length=255)
            source = clean_text(payload.source, max_length=50) or "n8n"
            notes = clean_text(payload.notes, max_length=2000)
        except ValueError as e:
            raise WebhookError(400, str(e), "VALIDATION_ERROR") from e

        logger.info(f"Reservation request for account {account.id} on {day} at {start}")

        try:
            # Conflict check and insert share one transaction holding the account lock
            self.repo.lock_account(self.db, account.id)

            staff_member = None
            if payload.staff_member_name:
                staff_members = self.repo.get_active_staff_members(self.db, account.id)
                staff_member = resolve_staff_member(payload.staff_member_name, staff_members)
                if staff_member:
                    logger.info(f"Staff member found: {staff_member.name} ({staff_member.id})")
                else:
                    logger.info(
                        f"No matching staff member for '{payload.staff_member_name}'. "
                        f"Available: {', '.join(s.name for s in staff_members) or 'none'}"
                    )

            staff_member_id = staff_member.id if staff_member else None
            staff_name = staff_member.name if staff_member else None

            existing = [
                booking
                for booking in (
                    to_existing_booking(r)
                    for r in self.repo.get_active_reservations_near_day(
                        self.db, account.id, day, staff_member_id
                    )
                )
                if booking is not None
            ]
            result = check_slot(day, start, existing, self.policy)
            requested_time = format_time_of_day(start)

            if result.conflict:
                self.db.rollback()
                logger.info(
                    f"Time slot conflict for {requested_time} on {day}"
                    + (f" ({staff_name})" if staff_name else "")
                )
                raise WebhookError(
                    409,
                    "TIME_SLOT_OCCUPIED",
                    success=False,
                    message=occupied_message(requested_time, payload.reservation_date, staff_name),
                    staff_member=staff_name,
                    alternative_slots=result.alternatives,
                    alternative_message=alternatives_message(result.alternatives, staff_name),
                )

            end_time = format_time_of_day(result.requested.end.time())
            party_size = payload.party_size or config.DEFAULT_PARTY_SIZE

            reservation = self.repo.add_reservation(
                self.db,
                account.id,
                customer_name=customer_name,
                customer_phone=customer_phone,
                customer_email=customer_email,
                reservation_date=day,
                reservation_time=requested_time,
                end_time=end_time,
                party_size=party_size,
                notes=notes,
                source=source,
                status="pending",
                staff_member_id=staff_member_id,
            )

            at_staff = f" bei {staff_name}" if staff_name else ""
            self.repo.add_notification(
                self.db,
                account.id,
                title="Neue Reservierung",
                message=sanitize_string(
                    f"{customer_name} hat eine Reservierung für {party_size} Personen am "
                    f"{payload.reservation_date} um {requested_time} Uhr{at_staff} angefragt."
                ),
                link="/portal/reservations",
            )
            self.db.commit()
            self.db.refresh(reservation)

        except WebhookError:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating reservation: {e}")
            raise WebhookError(500, "Internal server error", "INTERNAL_ERROR") from e

        logger.info(
            f"Reservation created successfully: {reservation.id} "
            + (f"assigned to {staff_name}" if staff_name else "unassigned")
        )

        return ReservationCreatedResponse(
            reservation_id=reservation.id,
            message=(
                f"Reservierung erfolgreich erstellt und {staff_name} zugewiesen"
                if staff_name
                else "Reservierung erfolgreich erstellt"
            ),
            reservation_date=payload.reservation_date,
            reservation_time=requested_time,
            end_time=end_time,
            staff_member_id=staff_member_id,
            staff_member_name=staff_name,
        )
