"""
Leave application state machine.

The initial status is chosen once from the applicant's role; after that
every application moves through the same table regardless of who
submitted it.

    pending_director --director approve--> pending_hr
    pending_director --director reject---> rejected
    pending_hr -------hr/admin approve---> approved
    pending_hr -------hr/admin reject----> rejected
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from leaveflow.core.exceptions import InvalidTransitionError, UnauthorizedActionError
from leaveflow.models.base import LeaveStatus, UserRole


class WorkflowAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class LedgerEffect(str, Enum):
    NONE = "none"
    COMMIT = "commit"
    RELEASE = "release"


class ApprovalStage(str, Enum):
    """Which set of approval fields a transition writes."""
    DIRECTOR = "director"
    HR = "hr"


@dataclass(frozen=True)
class Transition:
    source: LeaveStatus
    action: WorkflowAction
    target: LeaveStatus
    stage: ApprovalStage
    ledger_effect: LedgerEffect
    requires_comment: bool = False


# Roles allowed to act on an application in each actionable status
STAGE_AUTHORITY: Dict[LeaveStatus, FrozenSet[UserRole]] = {
    LeaveStatus.PENDING_DIRECTOR: frozenset({UserRole.DIRECTOR}),
    LeaveStatus.PENDING_HR: frozenset({UserRole.HR, UserRole.ADMIN}),
}

TRANSITIONS: Dict[Tuple[LeaveStatus, WorkflowAction], Transition] = {
    (t.source, t.action): t
    for t in (
        Transition(
            LeaveStatus.PENDING_DIRECTOR, WorkflowAction.APPROVE, LeaveStatus.PENDING_HR,
            ApprovalStage.DIRECTOR, LedgerEffect.NONE,
        ),
        Transition(
            LeaveStatus.PENDING_DIRECTOR, WorkflowAction.REJECT, LeaveStatus.REJECTED,
            ApprovalStage.DIRECTOR, LedgerEffect.RELEASE, requires_comment=True,
        ),
        Transition(
            LeaveStatus.PENDING_HR, WorkflowAction.APPROVE, LeaveStatus.APPROVED,
            ApprovalStage.HR, LedgerEffect.COMMIT,
        ),
        Transition(
            LeaveStatus.PENDING_HR, WorkflowAction.REJECT, LeaveStatus.REJECTED,
            ApprovalStage.HR, LedgerEffect.RELEASE, requires_comment=True,
        ),
    )
}

# Directors have no one above them at the first stage
INITIAL_STATUS: Dict[UserRole, LeaveStatus] = {
    UserRole.STAFF: LeaveStatus.PENDING_DIRECTOR,
    UserRole.HR: LeaveStatus.PENDING_DIRECTOR,
    UserRole.ADMIN: LeaveStatus.PENDING_DIRECTOR,
    UserRole.DIRECTOR: LeaveStatus.PENDING_HR,
}


def initial_status_for(role: UserRole) -> LeaveStatus:
    """Status a new application starts in, given the applicant's role."""
    return INITIAL_STATUS[role]


def pending_status_for(role: UserRole) -> Optional[LeaveStatus]:
    """The status whose queue an approver with this role works through."""
    for status, roles in STAGE_AUTHORITY.items():
        if role in roles:
            return status
    return None


def resolve_transition(status: LeaveStatus, action: WorkflowAction, role: UserRole) -> Transition:
    """
    Look up the transition for an action by an actor.

    The status is checked before the role, so repeating a completed
    action always reports an invalid transition.

    Raises:
        InvalidTransitionError: If the status accepts no such action
        UnauthorizedActionError: If the role cannot act at this stage
    """
    transition = TRANSITIONS.get((status, action))
    if transition is None:
        raise InvalidTransitionError(status.value, action.value)

    if role not in STAGE_AUTHORITY[status]:
        allowed = ", ".join(sorted(r.value for r in STAGE_AUTHORITY[status]))
        raise UnauthorizedActionError(
            f"A {role.value} cannot {action.value} an application awaiting {allowed}",
            role=role.value,
            status=status.value,
        )
    return transition
