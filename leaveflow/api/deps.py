"""
FastAPI dependencies.

Identity is resolved upstream; the caller's user id arrives in the
X-User-ID header and is passed explicitly into every service call.
"""

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from leaveflow.config.database import get_db_session
from leaveflow.core.constants import HEADER_USER_ID
from leaveflow.services.leave.leave_application_service import LeaveApplicationService


def get_db() -> Generator[Session, None, None]:
    """Yield a session bound to the configured engine."""
    yield from get_db_session()


def get_actor_id(
    user_id: Optional[str] = Header(None, alias=HEADER_USER_ID),
) -> str:
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {HEADER_USER_ID} header",
        )
    return user_id.strip()


def get_leave_service(db: Session = Depends(get_db)) -> LeaveApplicationService:
    return LeaveApplicationService(db)
