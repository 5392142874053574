"""
User repository: read access to externally provisioned identities.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leaveflow.models.base import UserRole
from leaveflow.models.leave.desired_leave_months import DesiredLeaveMonths
from leaveflow.models.user.user import User
from leaveflow.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """User lookups used by the workflow."""

    def __init__(self, session: Session):
        super().__init__(User, session)

    def find_active(self, user_id: str) -> Optional[User]:
        user = self.find_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    def find_by_role(self, role: UserRole, active_only: bool = True) -> List[User]:
        query = self.db.query(User).filter(User.role == role)
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.full_name).all()

    def find_without_desired_months(self) -> List[User]:
        """Active users who have not yet submitted their desired months."""
        submitted = self.db.query(DesiredLeaveMonths.user_id)
        return (
            self.db.query(User)
            .filter(User.is_active.is_(True), User.id.not_in(submitted))
            .order_by(User.full_name)
            .all()
        )
