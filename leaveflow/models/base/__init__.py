from leaveflow.models.base.base_model import Base, BaseModel, TimestampModel, enum_type, generate_uuid
from leaveflow.models.base.enums import LeaveStatus, LeaveType, StudyProgram, UserRole

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "enum_type",
    "generate_uuid",
    "LeaveStatus",
    "LeaveType",
    "StudyProgram",
    "UserRole",
]
