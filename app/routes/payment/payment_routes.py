"""
Payment Routes
API endpoints for submitting and reviewing manual payments
"""
import logging
from fastapi import APIRouter, Depends

from app.core.exceptions import LifecycleError
from app.models.payment.payment import PaymentCreate, PaymentReview
from app.routes.dependencies import get_payment_service
from app.services.payment.payment_service import PaymentService
from app.utils.response import success_response, error_response, lifecycle_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("")
async def create_payment(
    data: PaymentCreate,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    Submit payment evidence for an order.

    The payment is stored as Pending and the order moves to Payment Pending.
    A transaction ID can only be used once per payment method.
    """
    try:
        payment = await payment_service.submit(data)
        return success_response(
            message="Payment record created successfully",
            data={"payment": payment},
            status_code=201
        )
    except LifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.exception(f"Payment creation failed: {e}")
        return error_response(message="Server error during payment creation", status_code=500)


@router.get("")
async def get_all_payments(payment_service: PaymentService = Depends(get_payment_service)):
    """Admin: get all payments, latest first, with order prices"""
    payments = await payment_service.list_payments()
    return success_response(message="Payments retrieved", data={"payments": payments})


@router.get("/{payment_id}")
async def get_payment(
    payment_id: str,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """Get a single payment"""
    try:
        payment = await payment_service.get_payment(payment_id)
        return success_response(message="Payment retrieved", data={"payment": payment})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.patch("/{payment_id}/review")
async def review_payment(
    payment_id: str,
    data: PaymentReview,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """
    Admin: approve or reject a payment.
    Approval moves the order to In Progress unless it is already finished.
    """
    try:
        payment = await payment_service.review(payment_id, data.status, data.remarks)
        return success_response(message="Payment updated successfully", data={"payment": payment})
    except LifecycleError as e:
        return lifecycle_error_response(e)
