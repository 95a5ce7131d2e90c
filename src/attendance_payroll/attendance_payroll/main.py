"""Batch entry point.

    python -m attendance_payroll.main payroll 2025 1
    python -m attendance_payroll.main attendance 00002 2025 1
    python -m attendance_payroll.main assign-shift 00002 N1 2025-02-01 --reason "rotation"
    python -m attendance_payroll.main detect-periods 00002 2025-01-01 2025-03-31
    python -m attendance_payroll.main init-db
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from config import get_settings_module

from .attendance.status import status_short_code
from .common.datetime_utils import local_time_str, parse_iso_date
from .container import Container, build_container
from .core.exceptions import DomainError, StorageError
from .core.settings import EngineSettings
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .shifts.service import detect_shift_periods

log = logging.getLogger(__name__)


def _load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_payroll(container: Container, args: argparse.Namespace) -> int:
    run = container.payroll_service.run_month(
        args.year,
        args.month,
        employee_codes=args.employee or None,
        today=parse_iso_date(args.today) if args.today else None,
        max_workers=args.workers,
    )
    print(f"Payroll {run.month}")
    print(f"{'code':<10} {'viol':>4} {'full':>4} {'fine':>7} {'leave':>6} {'absent':>6} {'days':>7} {'net':>12}")
    for r in run.results:
        print(
            f"{r.employee_code:<10} {r.violation_count:>4} {r.violation_full_days:>4} {r.per_minute_fine_days:>7.3f} "
            f"{r.leave_deduction_days:>6.2f} {r.absent_deduction_days:>6.2f} {r.total_deduction_days:>7.3f} "
            f"{r.net_salary:>12.2f}"
        )
    for f in run.failures:
        print(f"FAILED {f.employee_code}: {f.error}")
    return 0 if run.ok else 1


def _cmd_attendance(container: Container, args: argparse.Namespace) -> int:
    employee = container.employees_repo.get_by_code(args.employee_code)
    if employee is None:
        print(f"Employee {args.employee_code} not found")
        return 1

    tz = container.settings.tz
    monthly = container.attendance_service.evaluate_month(
        employee,
        args.year,
        args.month,
        today=parse_iso_date(args.today) if args.today else None,
    )
    for d in monthly.days:
        check_in = local_time_str(d.check_in, tz) if d.check_in else "-"
        check_out = local_time_str(d.check_out, tz) if d.check_out else "-"
        flags = ("L" if d.late else "") + ("E" if d.early_leave else "")
        print(
            f"{d.business_date} {d.shift_code or '-':<4} {status_short_code(d.status):<4} "
            f"{check_in:>5} {check_out:>5} {flags:<2} {d.late_minutes:>4} {d.early_minutes:>4}"
        )
    for v in monthly.violations:
        print(f"#{v.violation_number} {v.business_date} {v.kind.value} {v.minutes}m")
    print(
        f"unpaid={monthly.unpaid_leave_days:g} absent={monthly.absent_days:g} half={monthly.half_days:g}"
    )
    return 0


def _cmd_assign_shift(container: Container, args: argparse.Namespace) -> int:
    created = container.shift_assignment_service.assign(
        employee_code=args.employee_code,
        shift_code=args.shift_code,
        effective_date=parse_iso_date(args.effective_date),
        prior_shift_code=args.prior_shift,
        reason=args.reason,
        changed_by=args.changed_by,
    )
    print(f"OK: {created.employee_code} -> {created.shift_code} from {created.effective_date}")
    return 0


def _cmd_detect_periods(container: Container, args: argparse.Namespace) -> int:
    employee = container.employees_repo.get_by_code(args.employee_code)
    if employee is None:
        print(f"Employee {args.employee_code} not found")
        return 1

    start, end = parse_iso_date(args.start), parse_iso_date(args.end)
    resolved = container.attendance_service.resolve_shift_codes(employee, start, end)
    for p in detect_shift_periods(resolved):
        print(f"{p.shift_code:<4} {p.start_date} -> {p.end_date or 'open'} ({p.days} day(s))")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="attendance_payroll", description="Attendance & payroll rule engine")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("payroll", help="Compute the monthly payroll batch")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)
    p.add_argument("--employee", action="append", help="Limit to an employee code (repeatable)")
    p.add_argument("--today", help="Evaluate as of this date (YYYY-MM-DD)")
    p.add_argument("--workers", type=int, default=1)

    p = sub.add_parser("attendance", help="Print one employee's monthly attendance")
    p.add_argument("employee_code")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)
    p.add_argument("--today")

    p = sub.add_parser("assign-shift", help="Assign a shift from a date")
    p.add_argument("employee_code")
    p.add_argument("shift_code")
    p.add_argument("effective_date")
    p.add_argument("--prior-shift", dest="prior_shift")
    p.add_argument("--reason", default="")
    p.add_argument("--changed-by", dest="changed_by", default="cli")

    p = sub.add_parser("detect-periods", help="Show consecutive shift periods from history")
    p.add_argument("employee_code")
    p.add_argument("start")
    p.add_argument("end")

    sub.add_parser("init-db", help="Apply database/schema.sql")
    return parser


_COMMANDS = {
    "payroll": _cmd_payroll,
    "attendance": _cmd_attendance,
    "assign-shift": _cmd_assign_shift,
    "detect-periods": _cmd_detect_periods,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings_module = _load_settings()
    _configure_logging(getattr(settings_module, "LOG_LEVEL", "INFO"))
    db_config = dict(getattr(settings_module, "DB_CONFIG"))

    if args.command == "init-db":
        config = DBConfig.from_mapping(db_config)
        apply_schema(config)
        print(f"OK: schema applied to {config.database} (tables={len(list_tables(config))})")
        return 0

    container = build_container(db_config=db_config, settings=EngineSettings.from_module(settings_module))
    try:
        return _COMMANDS[args.command](container, args)
    except DomainError as e:
        log.error("%s failed: %s", args.command, e)
        return 2
    except StorageError as e:
        log.error("%s failed on the store: %s", args.command, e)
        return 3


if __name__ == "__main__":
    sys.exit(main())
