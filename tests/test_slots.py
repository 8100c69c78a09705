from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from portal.domain.reservations.slots import (
    ExistingBooking,
    Interval,
    SchedulingPolicy,
    booking_interval,
    check_slot,
    find_alternative_slots,
    has_conflict,
    requested_interval,
    resolve_staff_member,
)

DAY = date(2026, 3, 18)
POLICY = SchedulingPolicy()


def at(hour, minute=0, day=DAY):
    return datetime.combine(day, time(hour, minute))


class TestInterval:
    def test_overlap_is_symmetric(self):
        a = Interval(at(14), at(15, 30))
        b = Interval(at(15), at(16, 30))
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_adjacent_intervals_do_not_conflict(self):
        a = Interval(at(14), at(15, 30))
        b = Interval(at(15, 30), at(17))
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_identical_intervals_conflict(self):
        a = Interval(at(12), at(13, 30))
        assert a.overlaps(Interval(at(12), at(13, 30)))

    def test_contained_interval_conflicts(self):
        assert Interval(at(12), at(16)).overlaps(Interval(at(13), at(14)))


class TestSchedulingPolicy:
    def test_default_grid(self):
        times = list(POLICY.candidate_times())
        assert times[0] == time(11, 0)
        assert times[-1] == time(21, 30)
        assert len(times) == 22

    def test_offsets_are_sorted(self):
        policy = SchedulingPolicy(open_hour=11, close_hour=12, minute_offsets=(30, 0))
        assert list(policy.candidate_times()) == [time(11, 0), time(11, 30)]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"duration_minutes": 0},
            {"open_hour": 22, "close_hour": 11},
            {"minute_offsets": (0, 60)},
            {"max_alternatives": -1},
        ],
    )
    def test_invalid_policy_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SchedulingPolicy(**kwargs)


class TestBookingInterval:
    def test_missing_end_uses_default_duration(self):
        interval = booking_interval(DAY, ExistingBooking(start_time=time(18)), POLICY)
        assert interval == Interval(at(18), at(19, 30))

    def test_end_before_start_crosses_midnight(self):
        booking = ExistingBooking(start_time=time(23), end_time=time(0, 30))
        interval = booking_interval(DAY, booking, POLICY)
        assert interval.end == datetime(2026, 3, 19, 0, 30)

    def test_end_equal_to_start_is_a_full_day(self):
        booking = ExistingBooking(start_time=time(12), end_time=time(12))
        interval = booking_interval(DAY, booking, POLICY)
        assert interval.end == datetime(2026, 3, 19, 12, 0)

    def test_booking_from_previous_day_keeps_its_own_date(self):
        booking = ExistingBooking(
            start_time=time(23, 30), end_time=time(1), booking_date=date(2026, 3, 17)
        )
        interval = booking_interval(DAY, booking, POLICY)
        assert interval == Interval(datetime(2026, 3, 17, 23, 30), at(1))

    def test_previous_day_booking_conflicts_after_midnight(self):
        booking = ExistingBooking(time(23, 30), time(1), booking_date=date(2026, 3, 17))
        assert check_slot(DAY, time(0, 30), [booking], POLICY).conflict
        assert not check_slot(DAY, time(1), [booking], POLICY).conflict


class TestCheckSlot:
    def test_free_slot_has_no_alternatives(self):
        result = check_slot(DAY, time(18), [ExistingBooking(time(14), time(15, 30))], POLICY)
        assert not result.conflict
        assert result.alternatives == []
        assert result.requested == Interval(at(18), at(19, 30))

    def test_booking_right_after_existing_is_free(self):
        result = check_slot(DAY, time(15, 30), [ExistingBooking(time(14), time(15, 30))], POLICY)
        assert not result.conflict

    def test_overlapping_request_gets_alternatives(self):
        result = check_slot(DAY, time(14, 30), [ExistingBooking(time(14), time(15, 30))], POLICY)
        assert result.conflict
        assert result.alternatives == ["11:00", "11:30", "12:00", "12:30", "15:30"]

    def test_no_existing_bookings_never_conflicts(self):
        assert not check_slot(DAY, time(11), [], POLICY).conflict

    def test_fully_booked_day_has_no_alternatives(self):
        existing = [ExistingBooking(time(10), time(23, 30))]
        result = check_slot(DAY, time(12), existing, POLICY)
        assert result.conflict
        assert result.alternatives == []

    def test_alternatives_respect_cap(self):
        policy = SchedulingPolicy(max_alternatives=2)
        result = check_slot(DAY, time(14), [ExistingBooking(time(14))], policy)
        assert result.alternatives == ["11:00", "11:30"]

    def test_alternatives_never_conflict_and_ascend(self):
        existing = [
            ExistingBooking(time(11, 30), time(13)),
            ExistingBooking(time(17), time(18)),
            ExistingBooking(time(19, 15)),
        ]
        occupied = [booking_interval(DAY, b, POLICY) for b in existing]

        alternatives = find_alternative_slots(DAY, occupied, POLICY)

        assert 0 < len(alternatives) <= POLICY.max_alternatives
        assert alternatives == sorted(alternatives)
        for slot in alternatives:
            hour, minute = map(int, slot.split(":"))
            candidate = requested_interval(DAY, time(hour, minute), POLICY)
            assert not has_conflict(candidate, occupied)


class TestResolveStaffMember:
    STAFF = [
        SimpleNamespace(id=1, name="Annabelle Meier"),
        SimpleNamespace(id=2, name="Anna"),
        SimpleNamespace(id=3, name="Müller"),
    ]

    def test_exact_match_wins_over_substring(self):
        assert resolve_staff_member("anna", self.STAFF).id == 2

    def test_search_contained_in_name(self):
        assert resolve_staff_member("Meier", self.STAFF).id == 1

    def test_name_contained_in_search(self):
        assert resolve_staff_member("Herr Müller bitte", self.STAFF).id == 3

    def test_no_match(self):
        assert resolve_staff_member("Zoe", self.STAFF) is None

    @pytest.mark.parametrize("search", [None, "", "   "])
    def test_empty_search(self, search):
        assert resolve_staff_member(search, self.STAFF) is None
