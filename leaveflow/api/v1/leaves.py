"""
Leave workflow API routes.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from leaveflow.api.deps import get_actor_id, get_leave_service
from leaveflow.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from leaveflow.core.exceptions import ErrorCode
from leaveflow.models.base import LeaveStatus, LeaveType
from leaveflow.schemas.common.pagination import PaginatedResponse
from leaveflow.schemas.leave import (
    ApprovalAction,
    DatePreview,
    DesiredMonthsRequest,
    DesiredMonthsResponse,
    LeaveApplicationFilter,
    LeaveApplicationRequest,
    LeaveApplicationResponse,
    LeaveBalanceSnapshot,
    LeaveValidationResult,
    RejectionAction,
)
from leaveflow.services.base.service_result import ServiceResult
from leaveflow.services.leave.leave_application_service import LeaveApplicationService

router = APIRouter(prefix="/leaves", tags=["Leave Workflow"])

HTTP_STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_SUBMITTED_DESIRED_MONTHS: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.LEDGER_INVARIANT_VIOLATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: ServiceResult):
    """Return the result data or raise the HTTP error matching its code."""
    if result.is_success:
        return result.data
    raise HTTPException(
        status_code=HTTP_STATUS_BY_CODE.get(result.error.code, status.HTTP_422_UNPROCESSABLE_ENTITY),
        detail=result.error.to_dict(),
    )


@router.post("/validate", response_model=LeaveValidationResult, summary="Dry-run validation")
def validate_leave(
    request: LeaveApplicationRequest,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.validate_application(actor_id, request))


@router.post(
    "",
    response_model=LeaveApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a leave application",
)
def submit_leave(
    request: LeaveApplicationRequest,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.submit_application(actor_id, request))


@router.get("", response_model=PaginatedResponse[LeaveApplicationResponse], summary="List leave applications")
def list_leaves(
    status_filter: Optional[List[LeaveStatus]] = Query(None, alias="status"),
    leave_type: Optional[List[LeaveType]] = Query(None),
    user_id: Optional[str] = Query(None),
    start_date_from: Optional[date] = Query(None),
    end_date_until: Optional[date] = Query(None),
    sort_by: str = Query("submitted_at", pattern=r"^(submitted_at|start_date|status|created_at)$"),
    sort_order: str = Query("desc", pattern=r"^(asc|desc)$"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    filters = LeaveApplicationFilter(
        status=status_filter,
        leave_type=leave_type,
        user_id=user_id,
        start_date_from=start_date_from,
        end_date_until=end_date_until,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = unwrap(service.list_applications(filters, page=page, page_size=page_size))
    return PaginatedResponse[LeaveApplicationResponse].from_result(
        result, LeaveApplicationResponse.model_validate
    )


@router.get("/pending", response_model=List[LeaveApplicationResponse], summary="Approval queue of the caller")
def pending_leaves(
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.list_pending_for_actor(actor_id))


@router.get("/preview", response_model=DatePreview, summary="End and resumption dates")
def preview_dates(
    start_date: date = Query(...),
    working_days: int = Query(..., ge=1),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.preview(start_date, working_days))


@router.get("/balances", response_model=List[LeaveBalanceSnapshot], summary="Balances of the caller")
def my_balances(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.get_balances(actor_id, year))


@router.post(
    "/desired-months",
    response_model=DesiredMonthsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Lock in desired annual leave months",
)
def submit_desired_months(
    request: DesiredMonthsRequest,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.submit_desired_months(actor_id, request.months))


@router.get("/desired-months/me", response_model=DesiredMonthsResponse, summary="Desired months of the caller")
def my_desired_months(
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.get_desired_months(actor_id))


@router.get("/{application_id}", response_model=LeaveApplicationResponse)
def get_leave(
    application_id: str,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.get_application(application_id))


@router.post("/{application_id}/approve", response_model=LeaveApplicationResponse)
def approve_leave(
    application_id: str,
    action: Optional[ApprovalAction] = None,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    comments = action.comments if action else None
    return unwrap(service.approve(application_id, actor_id, comments))


@router.post("/{application_id}/reject", response_model=LeaveApplicationResponse)
def reject_leave(
    application_id: str,
    action: RejectionAction,
    actor_id: str = Depends(get_actor_id),
    service: LeaveApplicationService = Depends(get_leave_service),
):
    return unwrap(service.reject(application_id, actor_id, action.comments))
