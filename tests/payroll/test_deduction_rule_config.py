from dataclasses import FrozenInstanceError

import pytest

from attendance_payroll.core.exceptions import ValidationError
from attendance_payroll.payroll.config import DeductionRuleConfig


def test_defaults():
    config = DeductionRuleConfig()

    assert (config.free_violations, config.milestone_interval) == (2, 3)
    assert config.per_minute_rate == 0.007
    assert config.leave_without_inform_days == 1.5
    assert config.days_per_month == 30


def test_from_nested_mapping():
    config = DeductionRuleConfig.from_mapping(
        {
            "violationConfig": {"freeViolations": 3, "milestoneInterval": 4, "perMinuteRate": 0.01},
            "absentConfig": {"leaveWithoutInformDays": 2},
            "leaveConfig": {"halfDayDays": 0.25},
            "salaryConfig": {"daysPerMonth": 26},
        }
    )

    assert config.free_violations == 3
    assert config.milestone_interval == 4
    assert config.per_minute_rate == 0.01
    assert config.leave_without_inform_days == 2.0
    assert config.half_day_days == 0.25
    assert config.days_per_month == 26
    assert config.max_per_minute_fine == 1.0


def test_from_flat_mapping_and_round_trip():
    config = DeductionRuleConfig.from_mapping({"free_violations": 1, "sick_leave_days": 0.5})

    assert config.free_violations == 1
    assert config.sick_leave_days == 0.5
    assert DeductionRuleConfig.from_mapping(config.to_nested()) == config


def test_empty_mapping_gives_defaults():
    assert DeductionRuleConfig.from_mapping(None) == DeductionRuleConfig()
    assert DeductionRuleConfig.from_mapping({}) == DeductionRuleConfig()


@pytest.mark.parametrize(
    "data",
    [
        {"milestone_interval": 0},
        {"days_per_month": 32},
        {"per_minute_rate": -0.1},
        {"free_violations": 1.5},
        {"unpaid_leave_days": "lots"},
    ],
)
def test_invalid_values_are_rejected(data):
    with pytest.raises(ValidationError):
        DeductionRuleConfig.from_mapping(data)


def test_config_is_immutable():
    config = DeductionRuleConfig()
    with pytest.raises(FrozenInstanceError):
        config.free_violations = 5  # type: ignore[misc]
