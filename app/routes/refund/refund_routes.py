"""
Refund Routes
"""
import logging
from fastapi import APIRouter, Depends

from app.core.exceptions import LifecycleError
from app.models.refund.refund import RefundCreate, RefundReview
from app.routes.dependencies import get_refund_service
from app.services.refund.refund_service import RefundService
from app.utils.response import success_response, error_response, lifecycle_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/refunds", tags=["Refunds"])


@router.post("")
async def create_refund(
    data: RefundCreate,
    refund_service: RefundService = Depends(get_refund_service)
):
    """Request a refund. Refunded orders cannot be refunded again."""
    try:
        refund = await refund_service.submit(data)
        return success_response(
            message="Refund request submitted successfully",
            data={"refund": refund},
            status_code=201
        )
    except LifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.exception(f"Refund request failed: {e}")
        return error_response(message="Server error during refund request", status_code=500)


@router.get("")
async def get_all_refunds(refund_service: RefundService = Depends(get_refund_service)):
    """Admin: get all refund requests"""
    refunds = await refund_service.list_refunds()
    return success_response(message="Refunds retrieved", data={"refunds": refunds})


@router.get("/user/{user_id}")
async def get_user_refunds(
    user_id: str,
    refund_service: RefundService = Depends(get_refund_service)
):
    """Get refund requests made by a user"""
    try:
        refunds = await refund_service.list_refunds_for_user(user_id)
        return success_response(message="Refunds retrieved", data={"refunds": refunds})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.get("/{refund_id}")
async def get_refund(
    refund_id: str,
    refund_service: RefundService = Depends(get_refund_service)
):
    try:
        refund = await refund_service.get_refund(refund_id)
        return success_response(message="Refund retrieved", data={"refund": refund})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.patch("/{refund_id}/review")
async def review_refund(
    refund_id: str,
    data: RefundReview,
    refund_service: RefundService = Depends(get_refund_service)
):
    """Admin: approve or reject a refund request"""
    try:
        refund = await refund_service.review(refund_id, data.status, data.admin_remarks)
        return success_response(message="Refund updated successfully", data={"refund": refund})
    except LifecycleError as e:
        return lifecycle_error_response(e)
