"""
Leave type configuration repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leaveflow.config.logging import get_logger
from leaveflow.core.constants import DEFAULT_LEAVE_TYPES
from leaveflow.core.exceptions import EntityNotFoundError
from leaveflow.models.base import LeaveType
from leaveflow.models.leave.leave_type import LeaveTypeConfig
from leaveflow.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


class LeaveTypeRepository(BaseRepository[LeaveTypeConfig]):
    """Read access to leave type policy plus default seeding."""

    def __init__(self, session: Session):
        super().__init__(LeaveTypeConfig, session)

    def find_by_type(self, leave_type: LeaveType) -> Optional[LeaveTypeConfig]:
        return (
            self.db.query(LeaveTypeConfig)
            .filter(LeaveTypeConfig.leave_type == leave_type)
            .first()
        )

    def get_by_type(self, leave_type: LeaveType) -> LeaveTypeConfig:
        """
        Get the policy for a leave type.

        Raises:
            EntityNotFoundError: If the catalogue has no row for the type
        """
        config = self.find_by_type(leave_type)
        if config is None:
            raise EntityNotFoundError("LeaveTypeConfig", leave_type.value)
        return config

    def list_all(self) -> List[LeaveTypeConfig]:
        return self.db.query(LeaveTypeConfig).order_by(LeaveTypeConfig.leave_type).all()

    def seed_defaults(self) -> int:
        """
        Insert the default catalogue rows that are missing.

        Existing rows are left untouched.

        Returns:
            Number of rows created
        """
        existing = {config.leave_type for config in self.list_all()}
        created = 0
        for leave_type, defaults in DEFAULT_LEAVE_TYPES.items():
            if leave_type in existing:
                continue
            self.db.add(
                LeaveTypeConfig(
                    leave_type=leave_type,
                    annual_days=defaults["annual_days"],
                    min_notice_days=defaults["min_notice_days"],
                    can_reapply=defaults["can_reapply"],
                    description=defaults["description"],
                )
            )
            created += 1
        if created:
            self.flush()
            logger.info(f"Seeded {created} leave type configuration(s)")
        return created
