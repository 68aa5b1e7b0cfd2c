from __future__ import annotations

from ..core.enums import ApprovalState
from ..core.exceptions import InvalidStateError

_ALLOWED: dict[ApprovalState, frozenset[ApprovalState]] = {
    ApprovalState.UNSUBMITTED: frozenset({ApprovalState.PENDING_APPROVAL}),
    ApprovalState.PENDING_APPROVAL: frozenset({ApprovalState.APPROVED, ApprovalState.REJECTED}),
    ApprovalState.APPROVED: frozenset({ApprovalState.REJECTED}),
    # Only a fresh check-in leaves REJECTED.
    ApprovalState.REJECTED: frozenset({ApprovalState.UNSUBMITTED, ApprovalState.PENDING_APPROVAL}),
}


def can_transition(current: ApprovalState, target: ApprovalState) -> bool:
    return target in _ALLOWED.get(current, frozenset())


def transition(current: ApprovalState, target: ApprovalState) -> ApprovalState:
    if not can_transition(current, target):
        raise InvalidStateError(f"Cannot move approval from {current.value} to {target.value}")
    return target
