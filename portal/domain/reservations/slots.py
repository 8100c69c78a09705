"""
Reservation slot logic - conflict detection and alternative slot search.

Everything here is pure: existing bookings, staff members and the
scheduling policy are passed in, so the rules can be tested without a
database.

Intervals are half-open [start, end): a booking ending at 14:00 does not
conflict with one starting at 14:00.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol

from ... import config
from ...shared.validators import format_time_of_day


@dataclass(frozen=True)
class SchedulingPolicy:
    """Business-hours grid and booking length used for reservations"""

    duration_minutes: int = 90
    open_hour: int = 11
    close_hour: int = 22  # exclusive: the last slot starts at (close_hour - 1):<last offset>
    minute_offsets: tuple[int, ...] = (0, 30)
    max_alternatives: int = 5

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        if not 0 <= self.open_hour < self.close_hour <= 24:
            raise ValueError("open_hour must be before close_hour within a day")
        if any(not 0 <= m < 60 for m in self.minute_offsets):
            raise ValueError("minute_offsets must be within 0-59")
        if self.max_alternatives < 0:
            raise ValueError("max_alternatives cannot be negative")

    @classmethod
    def from_config(cls) -> "SchedulingPolicy":
        return cls(
            duration_minutes=config.RESERVATION_DURATION_MINUTES,
            open_hour=config.BUSINESS_OPEN_HOUR,
            close_hour=config.BUSINESS_CLOSE_HOUR,
            minute_offsets=tuple(sorted(config.SLOT_MINUTE_OFFSETS)),
            max_alternatives=config.MAX_ALTERNATIVE_SLOTS,
        )

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    def candidate_times(self) -> Iterator[time]:
        """Slot start times in chronological order"""
        for hour in range(self.open_hour, self.close_hour):
            for minute in sorted(self.minute_offsets):
                yield time(hour, minute)


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class ExistingBooking:
    """Snapshot of a stored reservation as seen by the conflict check"""

    start_time: time
    end_time: Optional[time] = None
    staff_member_id: Optional[int] = None
    # None means the day being checked
    booking_date: Optional[date] = None


@dataclass
class SlotCheck:
    requested: Interval
    conflict: bool
    alternatives: list[str] = field(default_factory=list)


class NamedResource(Protocol):
    name: str


def requested_interval(day: date, start: time, policy: SchedulingPolicy) -> Interval:
    start_dt = datetime.combine(day, start)
    return Interval(start_dt, start_dt + policy.duration)


def booking_interval(day: date, booking: ExistingBooking, policy: SchedulingPolicy) -> Interval:
    """
    Interval occupied by an existing booking. A missing end time means the
    default duration; an end at or before the start crosses midnight.
    """
    day = booking.booking_date or day
    start_dt = datetime.combine(day, booking.start_time)
    if booking.end_time is None:
        return Interval(start_dt, start_dt + policy.duration)

    end_dt = datetime.combine(day, booking.end_time)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return Interval(start_dt, end_dt)


def has_conflict(candidate: Interval, occupied: Iterable[Interval]) -> bool:
    # Linear scan; a day holds few bookings
    return any(candidate.overlaps(interval) for interval in occupied)


def find_alternative_slots(
    day: date, occupied: Sequence[Interval], policy: SchedulingPolicy
) -> list[str]:
    """Up to policy.max_alternatives free HH:MM slots on the grid, ascending"""
    slots: list[str] = []
    if policy.max_alternatives == 0:
        return slots

    for slot_time in policy.candidate_times():
        if not has_conflict(requested_interval(day, slot_time, policy), occupied):
            slots.append(format_time_of_day(slot_time))
            if len(slots) >= policy.max_alternatives:
                break
    return slots


def check_slot(
    day: date,
    start: time,
    existing: Iterable[ExistingBooking],
    policy: SchedulingPolicy,
) -> SlotCheck:
    """
    Check a requested start time against existing bookings of that day and
    the previous one (a late booking may run past midnight).

    The caller passes only active bookings of the relevant resource.
    Alternatives are searched only when the request conflicts.
    """
    occupied = [booking_interval(day, booking, policy) for booking in existing]
    requested = requested_interval(day, start, policy)

    if not has_conflict(requested, occupied):
        return SlotCheck(requested=requested, conflict=False)

    return SlotCheck(
        requested=requested,
        conflict=True,
        alternatives=find_alternative_slots(day, occupied, policy),
    )


def resolve_staff_member(
    search_name: Optional[str], staff_members: Sequence[NamedResource]
) -> Optional[NamedResource]:
    """
    Match a free-text name against the account's active staff members.

    Exact (case-insensitive) match wins; otherwise the first member whose
    name contains the search text or is contained in it. No match -> None.
    """
    if not search_name or not search_name.strip():
        return None

    needle = search_name.strip().lower()
    normalized = [(member, member.name.strip().lower()) for member in staff_members]

    for member, name in normalized:
        if name == needle:
            return member

    for member, name in normalized:
        if name and (needle in name or name in needle):
            return member

    return None
