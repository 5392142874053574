"""
Desired leave months repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leaveflow.models.leave.desired_leave_months import DesiredLeaveMonths
from leaveflow.repositories.base.base_repository import BaseRepository


class DesiredMonthsRepository(BaseRepository[DesiredLeaveMonths]):
    """Insert-only store of each user's desired months."""

    def __init__(self, session: Session):
        super().__init__(DesiredLeaveMonths, session)

    def find_for_user(self, user_id: str) -> Optional[DesiredLeaveMonths]:
        return (
            self.db.query(DesiredLeaveMonths)
            .filter(DesiredLeaveMonths.user_id == user_id)
            .first()
        )

    def list_all(self) -> List[DesiredLeaveMonths]:
        return (
            self.db.query(DesiredLeaveMonths)
            .order_by(DesiredLeaveMonths.submitted_at.desc())
            .all()
        )
