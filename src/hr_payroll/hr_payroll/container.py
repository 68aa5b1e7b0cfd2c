from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.resolver import AttendanceStatusResolver
from .attendance.service import AttendanceService
from .common.locks import KeyedLock
from .core.rules import RuleSet
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher
from .overtime.engine import OvertimeEngine
from .overtime.mysql_overtime_repository import MySQLOvertimeRequestRepository
from .overtime.service import OvertimeRequestService
from .payroll.aggregator import PayrollAggregator
from .payroll.calculator.standard_calculator import calculator_for
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .work_calendar.classifier import WorkCalendarClassifier


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    rules: RuleSet

    employees_repo: MySQLEmployeeRepository
    leaves_repo: MySQLLeaveRepository
    attendance_repo: MySQLAttendanceRepository
    overtime_repo: MySQLOvertimeRequestRepository
    payroll_repo: MySQLPayrollRepository

    classifier: WorkCalendarClassifier
    overtime_engine: OvertimeEngine
    attendance_service: AttendanceService
    overtime_service: OvertimeRequestService
    payroll_aggregator: PayrollAggregator
    payroll_service: PayrollService


def build_container(*, db_config: dict, rules: RuleSet, notifier: NotificationDispatcher | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    overtime_repo = MySQLOvertimeRequestRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    locks = KeyedLock()
    classifier = WorkCalendarClassifier(rules.work)
    overtime_engine = OvertimeEngine(classifier, rules.overtime)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        leaves_repo,
        classifier=classifier,
        resolver=AttendanceStatusResolver(classifier, strategy_factory=AttendanceStrategyFactory()),
        overtime_engine=overtime_engine,
        locks=locks,
        timezone=rules.timezone,
    )
    overtime_service = OvertimeRequestService(overtime_repo, employees_repo, overtime_engine)
    payroll_aggregator = PayrollAggregator(
        payroll_repo,
        employees_repo,
        attendance_repo,
        overtime_repo,
        calculator=calculator_for(rules.payroll),
        overtime_engine=overtime_engine,
        notifier=notifier or LoggingNotificationDispatcher(),
        locks=locks,
        timezone=rules.timezone,
    )
    payroll_service = PayrollService(payroll_repo, employees_repo, payroll_aggregator, timezone=rules.timezone)

    return Container(
        conn=conn,
        rules=rules,
        employees_repo=employees_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        payroll_repo=payroll_repo,
        classifier=classifier,
        overtime_engine=overtime_engine,
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        payroll_aggregator=payroll_aggregator,
        payroll_service=payroll_service,
    )
