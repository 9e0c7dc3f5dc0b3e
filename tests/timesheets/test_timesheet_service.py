from __future__ import annotations

from datetime import date, time

import pytest

from hrms.core.context import RequestContext
from hrms.core.enums import Role, ShiftStatus
from hrms.core.exceptions import (
    AuthorizationError,
    DuplicateShiftError,
    InvalidTimeFormat,
    NoOpenShiftError,
    OrderError,
    ValidationError,
    ZeroDurationError,
)

from conftest import EMPLOYEE_ID, HR_ID, InMemoryShiftSession


@pytest.fixture
def svc(container):
    return container.timesheet_service


def test_clock_in_creates_open_pending_shift(svc, shifts_repo, employee_ctx):
    rec = svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")

    assert rec.is_open
    assert rec.clock_in == time(9, 0)
    assert rec.status == ShiftStatus.PENDING
    assert shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))] == rec


def test_second_clock_in_same_day_is_duplicate(svc, shifts_repo, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")

    with pytest.raises(DuplicateShiftError):
        svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="10:00")

    assert len(shifts_repo.rows) == 1
    assert shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))].clock_in == time(9, 0)


def test_clock_in_after_closed_shift_is_still_duplicate(svc, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")
    svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="17:00", break_duration="0")

    with pytest.raises(DuplicateShiftError):
        svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="18:00")


def test_racing_clock_in_is_caught_by_unique_key(svc, shifts_repo, employee_ctx, monkeypatch):
    # Both requests pass the existence check before either one inserts.
    monkeypatch.setattr(InMemoryShiftSession, "find_shift", lambda self, employee_id, work_date: None)

    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")
    with pytest.raises(DuplicateShiftError):
        svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:01")

    assert len(shifts_repo.rows) == 1


def test_clock_out_closes_shift_with_net_hours(svc, shifts_repo, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")
    rec = svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="17:30", break_duration="30")

    assert rec.total_hours == pytest.approx(8.0)
    assert rec.break_minutes == 30
    assert rec.status == ShiftStatus.PENDING

    stored = shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))]
    assert stored.clock_out == time(17, 30)
    assert stored.total_hours == pytest.approx(8.0)
    assert not stored.is_open


def test_clock_out_without_open_shift(svc, employee_ctx):
    with pytest.raises(NoOpenShiftError):
        svc.clock_out(employee_ctx, work_date="2024-06-02", clock_out="17:00", break_duration="0")


def test_clock_out_twice_has_no_open_shift(svc, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")
    svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="17:00", break_duration="0")

    with pytest.raises(NoOpenShiftError):
        svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="18:00", break_duration="0")


@pytest.mark.parametrize("clock_out", ["08:00", "09:00"])
def test_clock_out_not_after_clock_in(svc, shifts_repo, employee_ctx, clock_out):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")

    with pytest.raises(OrderError):
        svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out=clock_out, break_duration="0")

    assert shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))].is_open


def test_break_consuming_whole_shift_is_rejected(svc, shifts_repo, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")

    with pytest.raises(ZeroDurationError):
        svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="10:00", break_duration="60")

    assert shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))].is_open


@pytest.mark.parametrize("break_duration", ["", "-5", "abc", "12.5", "nan", "1441", "100000000000"])
def test_clock_out_rejects_bad_break(svc, employee_ctx, break_duration):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")

    with pytest.raises(ValidationError):
        svc.clock_out(employee_ctx, work_date="2024-06-01", clock_out="17:00", break_duration=break_duration)


@pytest.mark.parametrize("work_date", ["", "06/01/2024", "2024-13-01", "2024-02-30"])
def test_clock_in_rejects_bad_dates(svc, shifts_repo, employee_ctx, work_date):
    with pytest.raises(ValidationError):
        svc.clock_in(employee_ctx, work_date=work_date, clock_in="09:00")
    assert shifts_repo.rows == {}


def test_clock_in_rejects_bad_time(svc, shifts_repo, employee_ctx):
    with pytest.raises(InvalidTimeFormat):
        svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="9am")
    assert shifts_repo.rows == {}


def test_anonymous_caller_cannot_clock_in(svc):
    with pytest.raises(AuthorizationError):
        svc.clock_in(RequestContext(user_id=None, role=None), work_date="2024-06-01", clock_in="09:00")


def test_hr_manual_entry_is_closed_and_approved(svc, shifts_repo, hr_ctx):
    rec = svc.record_manual_entry(
        hr_ctx,
        employee_id="3",
        work_date="2024-06-03",
        clock_in="08:00 AM",
        clock_out="05:00 PM",
        break_duration="60",
    )

    assert rec.employee_id == 3
    assert rec.clock_in == time(8, 0)
    assert rec.clock_out == time(17, 0)
    assert rec.total_hours == pytest.approx(8.0)
    assert rec.status == ShiftStatus.APPROVED
    assert shifts_repo.rows[(3, date(2024, 6, 3))] == rec


def test_hr_manual_entry_allows_overnight(svc, hr_ctx):
    rec = svc.record_manual_entry(
        hr_ctx, employee_id="3", work_date="2024-06-03", clock_in="11:00 PM", clock_out="01:00 AM"
    )
    assert rec.total_hours == pytest.approx(2.0)
    assert rec.break_minutes == 0


def test_hr_manual_entry_duplicate_requires_override(svc, shifts_repo, hr_ctx, employee_ctx):
    svc.clock_in(employee_ctx, work_date="2024-06-01", clock_in="09:00")
    original = shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))]

    with pytest.raises(DuplicateShiftError):
        svc.record_manual_entry(
            hr_ctx, employee_id=str(EMPLOYEE_ID), work_date="2024-06-01", clock_in="08:00", clock_out="16:00"
        )
    assert shifts_repo.rows[(EMPLOYEE_ID, date(2024, 6, 1))] == original

    replaced = svc.record_manual_entry(
        hr_ctx,
        employee_id=str(EMPLOYEE_ID),
        work_date="2024-06-01",
        clock_in="08:00",
        clock_out="16:00",
        override=True,
    )
    assert replaced.id == original.id
    assert replaced.total_hours == pytest.approx(8.0)
    assert replaced.status == ShiftStatus.APPROVED
    assert len(shifts_repo.rows) == 1


def test_manual_entry_requires_hr(svc, shifts_repo, employee_ctx):
    with pytest.raises(AuthorizationError):
        svc.record_manual_entry(
            employee_ctx, employee_id="3", work_date="2024-06-03", clock_in="08:00", clock_out="17:00"
        )
    assert shifts_repo.rows == {}


@pytest.mark.parametrize("employee_id", ["", "abc", "0", "999"])
def test_manual_entry_rejects_unknown_employee(svc, hr_ctx, employee_id):
    with pytest.raises(ValidationError):
        svc.record_manual_entry(
            hr_ctx, employee_id=employee_id, work_date="2024-06-03", clock_in="08:00", clock_out="17:00"
        )


def test_recent_shifts_are_newest_first_and_limited(container, shifts_repo, employee_ctx):
    for day in range(1, 9):
        shifts_repo.add_closed(EMPLOYEE_ID, date(2024, 6, day), time(9, 0), time(17, 0), 8.0)
    shifts_repo.add_closed(HR_ID, date(2024, 6, 9), time(9, 0), time(17, 0), 8.0)

    recent = container.timesheet_service.recent_shifts(employee_ctx)

    assert [r.date.day for r in recent] == [8, 7, 6, 5, 4]
    assert all(r.employee_id == EMPLOYEE_ID for r in recent)


def test_list_my_shifts_filters_by_date_and_ignores_bad_filter(svc, shifts_repo, employee_ctx):
    shifts_repo.add_closed(EMPLOYEE_ID, date(2024, 6, 1), time(9, 0), time(17, 0), 8.0)
    shifts_repo.add_closed(EMPLOYEE_ID, date(2024, 6, 2), time(9, 0), time(17, 0), 8.0)

    assert [r.date for r in svc.list_my_shifts(employee_ctx, work_date="2024-06-02")] == [date(2024, 6, 2)]
    assert len(svc.list_my_shifts(employee_ctx, work_date="not-a-date")) == 2


def test_manual_entry_rejects_break_longer_than_a_day(svc, shifts_repo, hr_ctx):
    with pytest.raises(ValidationError):
        svc.record_manual_entry(
            hr_ctx,
            employee_id="3",
            work_date="2024-06-03",
            clock_in="08:00",
            clock_out="17:00",
            break_duration="100000000000",
        )
    assert shifts_repo.rows == {}


def test_manual_entry_accepts_full_day_break(svc, hr_ctx):
    rec = svc.record_manual_entry(
        hr_ctx,
        employee_id="3",
        work_date="2024-06-03",
        clock_in="08:00",
        clock_out="17:00",
        break_duration="1440",
    )
    assert rec.break_minutes == 1440
    assert rec.total_hours == 0.0
