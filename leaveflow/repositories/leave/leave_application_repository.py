"""
Leave application repository.

Overlap lookups, application numbering and filtered listings.
"""

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from leaveflow.models.base import LeaveStatus, LeaveType
from leaveflow.models.leave.leave_application import LeaveApplication
from leaveflow.repositories.base.base_repository import BaseRepository
from leaveflow.repositories.base.pagination import PaginatedResult, PaginationParams, paginate

SORTABLE_FIELDS = {
    "submitted_at": LeaveApplication.submitted_at,
    "start_date": LeaveApplication.start_date,
    "status": LeaveApplication.status,
    "created_at": LeaveApplication.created_at,
}


class LeaveApplicationRepository(BaseRepository[LeaveApplication]):
    """Leave application persistence."""

    def __init__(self, session: Session):
        super().__init__(LeaveApplication, session)

    def find_overlapping(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        statuses: Optional[Iterable[LeaveStatus]] = None,
    ) -> List[LeaveApplication]:
        """
        Applications of a user whose date range intersects [start_date, end_date].

        Both ends are inclusive, so a range ending the day before
        ``start_date`` does not overlap.

        Args:
            user_id: Applicant
            start_date: First day of the requested range
            end_date: Last day of the requested range
            statuses: Statuses to consider (default: the active statuses)
        """
        statuses = list(statuses) if statuses is not None else list(LeaveStatus.active_statuses())
        return (
            self.db.query(LeaveApplication)
            .filter(
                LeaveApplication.user_id == user_id,
                LeaveApplication.status.in_(statuses),
                and_(
                    LeaveApplication.start_date <= end_date,
                    LeaveApplication.end_date >= start_date,
                ),
            )
            .order_by(LeaveApplication.start_date)
            .all()
        )

    def next_application_number(self, year: int, prefix: str) -> str:
        """
        Next sequential number for the year, e.g. ``LV-2026-00042``.

        Two concurrent submitters may compute the same number; the unique
        constraint rejects the second insert.
        """
        pattern = f"{prefix}-{year}-%"
        issued = (
            self.db.query(LeaveApplication)
            .filter(LeaveApplication.application_number.like(pattern))
            .count()
        )
        return f"{prefix}-{year}-{issued + 1:05d}"

    def find_by_status(self, statuses: Iterable[LeaveStatus]) -> List[LeaveApplication]:
        """Applications in any of the given statuses, oldest submission first."""
        return (
            self.db.query(LeaveApplication)
            .filter(LeaveApplication.status.in_(list(statuses)))
            .order_by(LeaveApplication.submitted_at, LeaveApplication.created_at)
            .all()
        )

    def search(
        self,
        pagination: PaginationParams,
        statuses: Optional[List[LeaveStatus]] = None,
        leave_types: Optional[List[LeaveType]] = None,
        user_id: Optional[str] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
        sort_by: str = "submitted_at",
        sort_order: str = "desc",
    ) -> PaginatedResult[LeaveApplication]:
        """
        Filtered, sorted, paginated listing.

        Args:
            pagination: Page request
            statuses: Keep applications in these statuses
            leave_types: Keep applications of these types
            user_id: Keep applications of this applicant
            start_from: Keep applications starting on or after this date
            end_until: Keep applications ending on or before this date
            sort_by: One of submitted_at, start_date, status, created_at
            sort_order: ``asc`` or ``desc``
        """
        query = self.db.query(LeaveApplication)

        if statuses:
            query = query.filter(LeaveApplication.status.in_(statuses))
        if leave_types:
            query = query.filter(LeaveApplication.leave_type.in_(leave_types))
        if user_id:
            query = query.filter(LeaveApplication.user_id == user_id)
        if start_from:
            query = query.filter(LeaveApplication.start_date >= start_from)
        if end_until:
            query = query.filter(LeaveApplication.end_date <= end_until)

        column = SORTABLE_FIELDS.get(sort_by, LeaveApplication.submitted_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        query = query.order_by(ordering, LeaveApplication.id)

        return paginate(query, pagination)
