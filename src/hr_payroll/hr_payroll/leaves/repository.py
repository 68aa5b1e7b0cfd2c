from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import LeaveInterval


class LeaveRepository(Protocol):
    def list_approved(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveInterval]:
        """Approved leaves overlapping [start, end]."""

        raise NotImplementedError


def has_approved_leave(leaves: LeaveRepository | None, *, employee_id: int, day: date) -> bool:
    if leaves is None:
        return False
    return any(lv.covers(day) for lv in leaves.list_approved(employee_id=employee_id, start=day, end=day))
