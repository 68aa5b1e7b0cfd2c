"""HR payroll package.

This package is organized by feature modules (work_calendar, attendance, overtime,
payroll, ...) with service/repository layers around a pure rules core.
"""
