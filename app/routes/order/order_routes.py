"""
Order Routes
Order intake, lookup and admin maintenance
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.core.exceptions import LifecycleError
from app.models.order.order import OrderCreate, OrderDetailsUpdate, OrderStatusOverride
from app.routes.dependencies import get_order_service
from app.services.order.order_service import OrderService
from app.utils.response import success_response, error_response, lifecycle_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("")
async def create_order(
    data: OrderCreate,
    order_service: OrderService = Depends(get_order_service)
):
    """
    Place a new order.
    The client and the owner are emailed once the order is stored.
    """
    try:
        order = await order_service.create_order(data)
        return success_response(
            message="Order placed successfully",
            data={"id": order["_id"], "order": order},
            status_code=201
        )
    except LifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.exception(f"Order creation failed: {e}")
        return error_response(
            message="An unexpected server error occurred during order creation. Please try again later.",
            status_code=500
        )


@router.get("")
async def get_all_orders(order_service: OrderService = Depends(get_order_service)):
    """Admin: get all orders, newest first"""
    orders = await order_service.list_orders()
    return success_response(message="Orders retrieved", data={"orders": orders})


@router.get("/user/{email}")
async def get_user_orders(
    email: str,
    order_service: OrderService = Depends(get_order_service)
):
    """Get orders placed with an email address"""
    try:
        orders = await order_service.list_orders_for_email(email)
        return success_response(message="Orders retrieved", data={"orders": orders})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    order_service: OrderService = Depends(get_order_service)
):
    """Get a single order"""
    try:
        order = await order_service.get_order(order_id)
        return success_response(message="Order retrieved", data={"order": order})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.get("/{order_id}/status")
async def get_order_status(
    order_id: str,
    order_service: OrderService = Depends(get_order_service)
):
    """Get the current lifecycle status of an order"""
    try:
        status = await order_service.get_order_status(order_id)
        return success_response(
            message="Order status retrieved",
            data={"order_id": order_id, "status": status}
        )
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.get("/{order_id}/history")
async def get_order_history(
    order_id: str,
    order_service: OrderService = Depends(get_order_service)
):
    """Admin: audit trail of manual actions on an order"""
    try:
        history = await order_service.get_audit_history(order_id)
        return success_response(message="Order history retrieved", data={"history": history})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.patch("/{order_id}")
async def update_order_details(
    order_id: str,
    data: OrderDetailsUpdate,
    order_service: OrderService = Depends(get_order_service)
):
    """
    Admin: edit order details.
    Status cannot be changed here; use the status override endpoint.
    """
    try:
        order = await order_service.update_details(order_id, data)
        return success_response(message="Order updated successfully", data={"order": order})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.post("/{order_id}/status-override")
async def override_order_status(
    order_id: str,
    data: OrderStatusOverride,
    order_service: OrderService = Depends(get_order_service)
):
    """
    Admin: manually set an order's status.
    Bypasses the lifecycle rules; the change is written to the audit log.
    """
    try:
        order = await order_service.override_status(
            order_id=order_id,
            status=data.status,
            admin_id=data.admin_id,
            reason=data.reason
        )
        return success_response(message="Order status updated", data={"order": order})
    except LifecycleError as e:
        return lifecycle_error_response(e)


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    admin_id: Optional[str] = Query(None, description="Admin performing the deletion"),
    order_service: OrderService = Depends(get_order_service)
):
    """
    Admin: delete an order.
    Payments and refunds referencing it are kept.
    """
    try:
        await order_service.delete_order(order_id, admin_id=admin_id)
        return success_response(message="Order deleted successfully.")
    except LifecycleError as e:
        return lifecycle_error_response(e)
