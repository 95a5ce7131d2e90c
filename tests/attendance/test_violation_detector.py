from datetime import datetime, timezone

from attendance_payroll.attendance.factory import ShiftTimingFactory
from attendance_payroll.attendance.strategies.day_strategy import DayShiftStrategy
from attendance_payroll.attendance.strategies.overnight_strategy import OvernightShiftStrategy
from attendance_payroll.attendance.violations import ViolationDetector, compute_late_early
from attendance_payroll.common.datetime_utils import parse_utc_offset
from attendance_payroll.shifts.model import ShiftDefinition

TZ = parse_utc_offset("+05:00")

N1 = ShiftDefinition(code="N1", name="Night 1", start_time="21:00", end_time="06:00", crosses_midnight=True)
N2 = ShiftDefinition(code="N2", name="Night 2", start_time="22:00", end_time="07:00", crosses_midnight=True)
D1 = ShiftDefinition(code="D1", name="Day", start_time="09:00", end_time="18:00", grace_period_minutes=10)


def local(y, m, d, hh, mm=0):
    return datetime(y, m, d, hh, mm, tzinfo=TZ)


def test_night_shift_late_minutes_are_excess_beyond_grace():
    result = compute_late_early(N1, local(2025, 1, 6, 21, 20), local(2025, 1, 7, 6, 0), tz=TZ)

    assert result.late is True
    assert result.late_minutes == 5
    assert result.early_leave is False
    assert result.early_minutes == 0


def test_within_grace_is_on_time():
    result = compute_late_early(N1, local(2025, 1, 6, 21, 15), local(2025, 1, 7, 5, 45), tz=TZ)

    assert result.late is False
    assert result.early_leave is False
    assert not result.has_violation


def test_early_check_in_is_never_late_and_late_check_out_never_early():
    result = compute_late_early(D1, local(2025, 1, 6, 8, 0), local(2025, 1, 6, 20, 0), tz=TZ)

    assert result.late is False
    assert result.early_leave is False


def test_night_check_out_before_0800_counts_as_next_day():
    result = compute_late_early(N1, local(2025, 1, 6, 21, 0), local(2025, 1, 7, 5, 0), tz=TZ)

    assert result.early_leave is True
    assert result.early_minutes == 45


def test_night_check_in_after_midnight_is_late_for_previous_evening_shift():
    result = compute_late_early(N1, local(2025, 1, 8, 2, 16), local(2025, 1, 8, 6, 0), tz=TZ)

    # 02:16 is 316 minutes after 21:00, 15 of them grace
    assert result.late is True
    assert result.late_minutes == 301
    assert result.early_leave is False


def test_night_check_in_normalization_only_before_0600():
    night, day = OvernightShiftStrategy(), DayShiftStrategy()

    assert night.normalize_checkin(136) == 136 + 1440
    assert night.normalize_checkin(359) == 359 + 1440
    assert night.normalize_checkin(360) == 360
    assert night.normalize_checkin(1200) == 1200
    assert day.normalize_checkin(136) == 136


def test_day_shift_custom_grace():
    result = compute_late_early(D1, local(2025, 1, 6, 9, 25), local(2025, 1, 6, 17, 40), tz=TZ)

    assert result.late_minutes == 15
    assert result.early_minutes == 10


def test_missing_inputs_give_no_violation():
    assert not compute_late_early(None, local(2025, 1, 6, 9, 0), local(2025, 1, 6, 18, 0), tz=TZ).has_violation
    assert not compute_late_early(D1, None, local(2025, 1, 6, 18, 0), tz=TZ).has_violation
    assert not compute_late_early(D1, local(2025, 1, 6, 9, 50), None, tz=TZ).has_violation


def test_saturday_second_night_shift_uses_first_night_timing():
    shifts = {"N1": N1, "N2": N2}
    # 2025-01-04 is a Saturday; 21:30 is on time for N2 but late for N1
    saturday = compute_late_early(N2, local(2025, 1, 4, 21, 30), local(2025, 1, 5, 7, 0), tz=TZ, shifts_by_code=shifts)
    friday = compute_late_early(N2, local(2025, 1, 3, 21, 30), local(2025, 1, 4, 7, 0), tz=TZ, shifts_by_code=shifts)

    assert saturday.late is True
    assert saturday.late_minutes == 15
    assert friday.late is False


def test_saturday_rule_needs_the_substitute_shift():
    result = compute_late_early(N2, local(2025, 1, 4, 22, 10), local(2025, 1, 5, 7, 0), tz=TZ, shifts_by_code={})

    assert result.late is False


def test_detector_is_idempotent():
    detector = ViolationDetector(TZ)
    args = (N1, local(2025, 1, 6, 21, 40), local(2025, 1, 7, 5, 0))

    assert detector.compute_late_early(*args) == detector.compute_late_early(*args)


def test_unset_grace_uses_configured_default():
    no_grace = ShiftDefinition(code="D2", name="Day", start_time="09:00", end_time="18:00", grace_period_minutes=0)
    detector = ViolationDetector(TZ, default_grace_minutes=5)

    result = detector.compute_late_early(no_grace, local(2025, 1, 6, 9, 8), local(2025, 1, 6, 18, 0))

    assert result.late_minutes == 3


def test_factory_picks_strategy_by_midnight_flag():
    factory = ShiftTimingFactory()

    assert isinstance(factory.for_shift(N1), OvernightShiftStrategy)
    assert isinstance(factory.for_shift(D1), DayShiftStrategy)
