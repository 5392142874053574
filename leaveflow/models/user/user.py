"""
User, department and designation models.

Users are provisioned by the surrounding application; the workflow engine
only reads identity, role and active flag.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaveflow.models.base import TimestampModel, UserRole, enum_type

if TYPE_CHECKING:
    from leaveflow.models.leave.leave_application import LeaveApplication

__all__ = ["User", "Department", "Designation"]


class Department(TimestampModel):
    """Organisational department."""

    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)


class Designation(TimestampModel):
    """Job designation (title)."""

    __tablename__ = "designations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class User(TimestampModel):
    """
    Employee identity as seen by the workflow engine.

    Role decides the workflow entry point and approval authority.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_role", "role"),
        Index("ix_users_department_id", "department_id"),
        {"comment": "Employees known to the leave workflow"}
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        enum_type(UserRole, "user_role_enum"),
        nullable=False,
        default=UserRole.STAFF,
        comment="staff, director, hr or admin"
    )
    department_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True
    )
    designation_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("designations.id", ondelete="SET NULL"),
        nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    department: Mapped[Optional["Department"]] = relationship(
        "Department",
        foreign_keys=[department_id],
        lazy="select"
    )
    designation: Mapped[Optional["Designation"]] = relationship("Designation", lazy="select")
    leave_applications: Mapped[list["LeaveApplication"]] = relationship(
        "LeaveApplication",
        back_populates="user",
        foreign_keys="LeaveApplication.user_id",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"
