"""
Tests for the vaccination status engine.

Pure functions only: records and catalog entries are built in memory and
"today" is always passed explicitly.
"""
import random
from datetime import date, timedelta

import pytest

from app.db.enums import VaccinationStatus, VaccinationView
from app.db.models import VaccinationRecord, VaccineScheduleEntry
from app.services import vaccination_service
from app.services.vaccination_service import (
    AT_BIRTH_LABEL,
    InvalidCatalogEntryError,
    build_schedule,
    filter_records,
    get_age_label,
    get_status,
    group_by_age,
    is_due,
    summarize,
)

DOB = date(2024, 1, 1)

_counter = 0


def make_entry(code: str, sort_order: int | None = None, **age) -> VaccineScheduleEntry:
    global _counter
    _counter += 1
    return VaccineScheduleEntry(
        vaccine_name=code,
        vaccine_code=code,
        purpose=f"Protects against {code}",
        age_weeks=age.get("weeks"),
        age_months=age.get("months"),
        age_years=age.get("years"),
        is_optional=False,
        sort_order=sort_order if sort_order is not None else _counter,
    )


def make_record(entry: VaccineScheduleEntry, completed: bool = False) -> VaccinationRecord:
    return VaccinationRecord(
        schedule=entry,
        is_completed=completed,
        administered_date=date(2024, 6, 1) if completed else None,
    )


def on_day(days: int) -> date:
    return DOB + timedelta(days=days)


# =============================================================================
# Age labels
# =============================================================================

def test_age_label_branches():
    assert get_age_label(make_entry("BCG")) == AT_BIRTH_LABEL
    assert get_age_label(make_entry("PENTA1", weeks=6)) == "6 weeks"
    assert get_age_label(make_entry("MR1", months=9)) == "9 months"
    assert get_age_label(make_entry("DPTB2", years=5)) == "5 years"


def test_age_label_is_literal_for_singular_values():
    assert get_age_label(make_entry("X", weeks=1)) == "1 weeks"


def test_age_label_zero_offset_is_at_birth():
    assert get_age_label(make_entry("X", months=0)) == AT_BIRTH_LABEL
    assert get_age_label(make_entry("Y", weeks=0)) == AT_BIRTH_LABEL


def test_zero_offset_groups_with_at_birth():
    bcg = make_record(make_entry("BCG", sort_order=1))
    zero = make_record(make_entry("OPV0", sort_order=2, weeks=0))
    groups = group_by_age([bcg, zero])
    assert list(groups) == [AT_BIRTH_LABEL]
    assert len(groups[AT_BIRTH_LABEL]) == 2
    assert is_due(zero, DOB, DOB) is True


def test_validate_catalog_entry_rejects_two_offsets():
    with pytest.raises(InvalidCatalogEntryError):
        vaccination_service.validate_catalog_entry(make_entry("BAD", weeks=6, months=2))


def test_validate_catalog_entry_accepts_single_or_none():
    vaccination_service.validate_catalog_entry(make_entry("BCG"))
    vaccination_service.validate_catalog_entry(make_entry("TD16", years=16))


# =============================================================================
# Due-now predicate
# =============================================================================

@pytest.mark.parametrize(
    "age",
    [{}, {"weeks": 6}, {"months": 2}, {"years": 5}],
)
def test_completed_record_is_never_due(age):
    record = make_record(make_entry("X", **age), completed=True)
    for today in (DOB, on_day(10_000), date(2090, 1, 1)):
        assert is_due(record, DOB, today) is False
        assert get_status(record, DOB, today) == VaccinationStatus.COMPLETED


def test_at_birth_entry_due_on_day_zero():
    record = make_record(make_entry("BCG"))
    assert is_due(record, DOB, DOB) is True


def test_at_birth_entry_still_due_after_fifty_years():
    record = make_record(make_entry("BCG"))
    assert is_due(record, DOB, date(2074, 1, 1)) is True


def test_six_week_boundary():
    record = make_record(make_entry("PENTA1", weeks=6))
    assert is_due(record, DOB, on_day(41)) is False
    assert is_due(record, DOB, on_day(42)) is True


def test_scenario_bcg_at_birth_always_due():
    record = make_record(make_entry("BCG"))
    for today in (date(2024, 1, 1), date(2024, 7, 15), date(2031, 12, 31)):
        assert is_due(record, DOB, today) is True


def test_scenario_two_months_uses_thirty_day_months():
    record = make_record(make_entry("M2", months=2))
    assert is_due(record, DOB, date(2024, 3, 5)) is True  # day 64
    assert is_due(record, DOB, date(2024, 2, 28)) is False  # day 58
    assert is_due(record, DOB, on_day(59)) is False
    assert is_due(record, DOB, on_day(60)) is True


def test_years_use_365_day_years():
    record = make_record(make_entry("DPTB2", years=5))
    # 2024 and 2028 are leap years, so day 1825 falls before the fifth birthday
    assert on_day(1825) == date(2028, 12, 30)
    assert is_due(record, DOB, on_day(1824)) is False
    assert is_due(record, DOB, on_day(1825)) is True


def test_status_upcoming_before_threshold():
    record = make_record(make_entry("MR1", months=9))
    assert get_status(record, DOB, on_day(100)) == VaccinationStatus.UPCOMING
    assert get_status(record, DOB, on_day(270)) == VaccinationStatus.DUE


# =============================================================================
# Counts and grouping
# =============================================================================

def _sample_records() -> list[VaccinationRecord]:
    bcg = make_entry("BCG", sort_order=1)
    opv0 = make_entry("OPV0", sort_order=2)
    penta1 = make_entry("PENTA1", sort_order=3, weeks=6)
    opv1 = make_entry("OPV1", sort_order=4, weeks=6)
    mr1 = make_entry("MR1", sort_order=5, months=9)
    dptb2 = make_entry("DPTB2", sort_order=6, years=5)
    return [
        make_record(bcg, completed=True),
        make_record(opv0),
        make_record(penta1, completed=True),
        make_record(opv1),
        make_record(mr1),
        make_record(dptb2),
    ]


def test_summarize_partitions_total():
    records = _sample_records()
    summary = summarize(records, DOB, on_day(100))
    assert summary.total == 6
    assert summary.completed == 2
    assert summary.due == 2  # OPV0 (at birth), OPV1 (6 weeks)
    assert summary.upcoming == 2  # MR1, DPTB2


def test_summarize_sums_to_total_on_any_day():
    records = _sample_records()
    for days in (0, 41, 42, 269, 270, 1825, 20_000):
        summary = summarize(records, DOB, on_day(days))
        assert summary.completed + summary.due + summary.upcoming == summary.total


def test_summarize_empty():
    summary = summarize([], DOB, DOB)
    assert tuple(summary) == (0, 0, 0, 0)


def test_group_order_follows_catalog_not_input_order():
    records = _sample_records()
    shuffled = records[:]
    random.Random(7).shuffle(shuffled)
    shuffled.reverse()

    groups = group_by_age(shuffled)

    assert list(groups) == [AT_BIRTH_LABEL, "6 weeks", "9 months", "5 years"]
    assert [r.schedule.vaccine_code for r in groups["6 weeks"]] == ["PENTA1", "OPV1"]


def test_group_order_is_not_alphabetical():
    late = make_record(make_entry("A_LATE", sort_order=2, years=10))
    early = make_record(make_entry("Z_EARLY", sort_order=1, weeks=10))
    assert list(group_by_age([late, early])) == ["10 weeks", "10 years"]


def test_filter_views():
    records = _sample_records()
    today = on_day(100)
    due = filter_records(records, VaccinationView.DUE, DOB, today)
    completed = filter_records(records, VaccinationView.COMPLETED, DOB, today)
    everything = filter_records(records, VaccinationView.ALL, DOB, today)

    assert [r.schedule.vaccine_code for r in due] == ["OPV0", "OPV1"]
    assert [r.schedule.vaccine_code for r in completed] == ["BCG", "PENTA1"]
    assert len(everything) == 6


def test_build_schedule_counts_cover_all_records_for_any_view():
    records = _sample_records()
    schedule = build_schedule(None, records, DOB, on_day(100), VaccinationView.COMPLETED)

    assert schedule.summary.total == 6
    assert schedule.summary.due == 2
    assert [i.record.schedule.vaccine_code for i in schedule.items] == ["BCG", "PENTA1"]
    assert [label for label, _ in schedule.groups] == [AT_BIRTH_LABEL, "6 weeks"]
    assert all(i.status == VaccinationStatus.COMPLETED for i in schedule.items)


def test_build_schedule_items_carry_label_and_due_flag():
    records = _sample_records()
    schedule = build_schedule(None, records, DOB, on_day(100))

    by_code = {i.record.schedule.vaccine_code: i for i in schedule.items}
    assert by_code["OPV1"].age_label == "6 weeks"
    assert by_code["OPV1"].is_due is True
    assert by_code["MR1"].is_due is False
    assert by_code["MR1"].status == VaccinationStatus.UPCOMING
    assert schedule.evaluated_on == on_day(100)
