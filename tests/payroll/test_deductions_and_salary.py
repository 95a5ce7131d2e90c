import pytest

from attendance_payroll.core.enums import AttendanceStatus, LeaveBucket
from attendance_payroll.payroll.config import DeductionRuleConfig
from attendance_payroll.payroll.deductions import (
    calculate_total_deduction_days,
    leave_bucket_for,
    leave_deduction_days,
    missing_punch_deduction_days,
)
from attendance_payroll.payroll.salary import calculate_salary_amounts

CONFIG = DeductionRuleConfig()


def test_total_deduction_days_is_the_sum_rounded():
    total = calculate_total_deduction_days(
        violation_full_days=1,
        per_minute_fine_days=0.525,
        unpaid_leave_days=2,
        absent_days=1.5,
        half_days=0.5,
    )

    assert total == 5.525


def test_leave_lookup():
    assert leave_deduction_days(AttendanceStatus.UNPAID_LEAVE, CONFIG) == 1.0
    assert leave_deduction_days(AttendanceStatus.SICK_LEAVE, CONFIG) == 1.0
    assert leave_deduction_days(AttendanceStatus.HALF_DAY, CONFIG) == 0.5
    assert leave_deduction_days(AttendanceStatus.PAID_LEAVE, CONFIG) == 0.0
    assert leave_deduction_days(AttendanceStatus.LEAVE_WITHOUT_INFORM, CONFIG) == 1.5
    assert leave_deduction_days(AttendanceStatus.PRESENT, CONFIG) == 0.0


def test_leave_buckets():
    assert leave_bucket_for(AttendanceStatus.SICK_LEAVE) is LeaveBucket.UNPAID_LEAVE
    assert leave_bucket_for(AttendanceStatus.LEAVE_WITHOUT_INFORM) is LeaveBucket.ABSENT
    assert leave_bucket_for(AttendanceStatus.HALF_DAY) is LeaveBucket.HALF_DAY
    assert leave_bucket_for(AttendanceStatus.PAID_LEAVE) is LeaveBucket.NONE


def test_missing_punch_lookup():
    config = DeductionRuleConfig(both_missing_days=1.0, partial_punch_days=0.5)

    assert missing_punch_deduction_days(True, False, config) == 1.0
    assert missing_punch_deduction_days(False, True, config) == 0.5
    assert missing_punch_deduction_days(False, False, config) == 0.0


def test_salary_amounts_for_documented_month():
    amounts = calculate_salary_amounts(30000, 5.525, 30)

    assert amounts.per_day_salary == 1000
    assert amounts.deduction_amount == 5525
    assert amounts.net_salary == 24475


def test_zero_gross_gives_zero_amounts():
    for days in (0, 1.5, 31):
        amounts = calculate_salary_amounts(0, days, 30)
        assert (amounts.per_day_salary, amounts.deduction_amount, amounts.net_salary) == (0, 0, 0)


def test_actual_month_length_and_fallback():
    assert calculate_salary_amounts(28000, 1, 28).per_day_salary == 1000
    assert calculate_salary_amounts(31000, 1, None).per_day_salary == pytest.approx(1033.33)
    assert calculate_salary_amounts(31000, 1, None, config=DeductionRuleConfig(days_per_month=31)).per_day_salary == 1000


def test_amounts_round_to_two_decimals():
    amounts = calculate_salary_amounts(10000, 1.333, 31)

    assert amounts.per_day_salary == 322.58
    assert amounts.deduction_amount == 430.0
    assert amounts.net_salary == 9570.0
