"""
Email templates for order, payment and refund notifications.
Each builder returns ``(subject, html_body)``.
"""
from datetime import datetime
from html import escape
from typing import Any, Dict, Optional, Tuple

from app.core.config import Settings

Email = Tuple[str, str]

GREEN = "#28a745"
RED = "#dc3545"
AMBER = "#ffc107"

_GREEN_STATUSES = {"Completed", "Approved"}
_RED_STATUSES = {"Cancelled", "Failed", "Refunded", "Rejected", "Refund Rejected"}


def status_color(status: str) -> str:
    if status in _GREEN_STATUSES:
        return GREEN
    if status in _RED_STATUSES:
        return RED
    return AMBER


def short_id(record_id: Any) -> str:
    """First 8 characters of an id, for subjects"""
    return f"{str(record_id)[:8]}..."


def _value(value: Any) -> str:
    return escape(str(value)) if value is not None else ""


def _link(label: str, url: Optional[str], text: Optional[str] = None) -> str:
    if not url:
        return ""
    return (
        f'<p><strong>{label}:</strong> <a href="{escape(url)}" target="_blank" '
        f'rel="noopener noreferrer">{escape(text or url)}</a></p>'
    )


def _format_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return _value(value)


class EmailTemplates:
    """Renders the HTML emails sent to clients and the owner"""

    def __init__(self, settings: Settings):
        self.brand = settings.app_name
        self.currency = settings.currency

    def _money(self, amount: Any) -> str:
        try:
            return f"{self.currency} {float(amount):.0f}"
        except (TypeError, ValueError):
            return f"{self.currency} {_value(amount)}"

    def _wrap(self, body: str) -> str:
        return f"""
        <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            {body}
        </div>
        """

    def _signature(self, closing: str = "Best regards,") -> str:
        return f'<p style="font-size: 0.9em; color: #555;">{closing}<br>The {escape(self.brand)} Team</p>'

    def _status_span(self, status: str) -> str:
        return (
            f'<span style="color: {status_color(status)}; font-weight: bold;">'
            f"{_value(status)}</span>"
        )

    # ==================== ORDERS ====================

    def order_placed_client(self, order: Dict[str, Any]) -> Email:
        subject = "Your Order Has Been Placed!"
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(order["name"])},</h2>
            <p>Thank you for your order! Your order for <strong>{_value(order["service"])}</strong> on <strong>{_value(order["platform"])}</strong> has been successfully placed.</p>
            <p><strong>Order ID:</strong> {_value(order["_id"])}</p>
            <p><strong>Service:</strong> {_value(order["service"])}</p>
            <p><strong>Quantity:</strong> {int(order["required_followers"]):,}</p>
            <p><strong>Price:</strong> {self._money(order["price"])}</p>
            <p>We will process your order shortly. You will receive another email once the status changes.</p>
            {self._signature()}
        """
        return subject, self._wrap(body)

    def order_placed_admin(self, order: Dict[str, Any]) -> Email:
        subject = f"New Order Placed: {order['platform']} {order['service']} - ID: {short_id(order['_id'])}"
        social_id = order.get("social_id")
        social_html = f"<p><strong>Social ID:</strong> {_value(social_id)}</p>" if social_id else ""
        body = f"""
            <h2 style="color: #6a0dad;">New Order Notification!</h2>
            <p>A new order has been placed on your {escape(self.brand)} website.</p>
            <p><strong>Order ID:</strong> {_value(order["_id"])}</p>
            <p><strong>Client Name:</strong> {_value(order["name"])}</p>
            <p><strong>Client Email:</strong> {_value(order["email"])}</p>
            <p><strong>Phone Number:</strong> {_value(order["phone_number"])}</p>
            <p><strong>Platform:</strong> {_value(order["platform"])}</p>
            <p><strong>Service:</strong> {_value(order["service"])}</p>
            <p><strong>Quantity:</strong> {int(order["required_followers"]):,}</p>
            <p><strong>Price:</strong> {self._money(order["price"])}</p>
            {_link("Profile Link", order.get("profile_link"))}
            {_link("Post Link", order.get("post_link"))}
            {social_html}
            <p><strong>Status:</strong> {_value(order["status"])}</p>
            <p><strong>Order Date:</strong> {_format_date(order.get("created_at"))}</p>
            <hr style="border: 0; border-top: 1px solid #eee; margin: 20px 0;">
            <p style="font-size: 0.9em; color: #555;">Please log in to the admin panel to manage this order.</p>
        """
        return subject, self._wrap(body)

    def order_status_client(self, order: Dict[str, Any]) -> Email:
        status = order["status"]
        subject = f"Your Order #{short_id(order['_id'])} Status Updated to {status}"
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(order["name"])},</h2>
            <p>Your order for <strong>{_value(order["service"])}</strong> on <strong>{_value(order["platform"])}</strong> has been updated.</p>
            <p><strong>Order ID:</strong> {_value(order["_id"])}</p>
            <p><strong>New Status:</strong> {self._status_span(status)}</p>
            {self._signature("Thank you for your patience.")}
        """
        return subject, self._wrap(body)

    def order_status_admin(self, order: Dict[str, Any]) -> Email:
        status = order["status"]
        subject = f"Order Status Changed: Order ID {short_id(order['_id'])} - {status}"
        body = f"""
            <h2 style="color: #6a0dad;">Order Status Change Notification!</h2>
            <p>Order ID: <strong>{_value(order["_id"])}</strong> for Client <strong>{_value(order["name"])}</strong> has been updated to <strong>{_value(status)}</strong>.</p>
            <p><strong>Client Email:</strong> {_value(order["email"])}</p>
            <p><strong>Service:</strong> {_value(order["service"])}</p>
            <p><strong>New Status:</strong> {self._status_span(status)}</p>
            <p style="font-size: 0.9em; color: #555;">Please review the order in your admin panel.</p>
        """
        return subject, self._wrap(body)

    # ==================== PAYMENTS ====================

    def payment_received_client(self, payment: Dict[str, Any]) -> Email:
        subject = "Payment Received for Your Order!"
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(payment["client_name"])},</h2>
            <p>We have received your payment for Order ID: <strong>{_value(payment["order_id"])}</strong>.</p>
            <p><strong>Amount:</strong> {self._money(payment["amount"])}</p>
            <p><strong>Payment Method:</strong> {_value(payment["payment_method"])}</p>
            <p><strong>Transaction ID:</strong> {_value(payment["transaction_id"])}</p>
            <p>Your payment is currently under review. We will notify you once it's approved.</p>
            {self._signature()}
        """
        return subject, self._wrap(body)

    def payment_received_admin(self, payment: Dict[str, Any]) -> Email:
        subject = f"New Payment Received for Order ID: {short_id(payment['order_id'])}"
        body = f"""
            <h2 style="color: #6a0dad;">New Payment Notification!</h2>
            <p>A new payment has been recorded for Order ID: <strong>{_value(payment["order_id"])}</strong>.</p>
            <p><strong>Client Name:</strong> {_value(payment["client_name"])}</p>
            <p><strong>Client Email:</strong> {_value(payment["client_email"])}</p>
            <p><strong>Amount:</strong> {self._money(payment["amount"])}</p>
            <p><strong>Payment Method:</strong> {_value(payment["payment_method"])}</p>
            <p><strong>Transaction ID:</strong> {_value(payment["transaction_id"])}</p>
            {_link("Screenshot", payment.get("screenshot_url"), "View Screenshot")}
            <p><strong>Status:</strong> {_value(payment["status"])}</p>
            <p><strong>Payment Date:</strong> {_format_date(payment.get("payment_date"))}</p>
            <p><strong>Remarks:</strong> {_value(payment.get("remarks") or "N/A")}</p>
            <p style="font-size: 0.9em; color: #555;">Please log in to your admin panel to review and approve this payment.</p>
        """
        return subject, self._wrap(body)

    def _payment_details(self, payment: Dict[str, Any]) -> str:
        remarks = payment.get("remarks")
        remarks_html = ""
        if remarks and remarks != "No remarks.":
            remarks_html = f"<p><strong>Remarks:</strong> {_value(remarks)}</p>"
        return f"""
            <p><strong>Amount:</strong> {self._money(payment["amount"])}</p>
            <p><strong>Payment Method:</strong> {_value(payment["payment_method"])}</p>
            <p><strong>Transaction ID:</strong> {_value(payment["transaction_id"])}</p>
            {_link("Screenshot", payment.get("screenshot_url"), "View Screenshot")}
            {remarks_html}
        """

    def payment_status_client(self, payment: Dict[str, Any]) -> Email:
        status = payment["status"]
        subject = f"Your Payment for Order #{short_id(payment['order_id'])} Status: {status}"
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(payment["client_name"])},</h2>
            <p>Your payment for Order ID: <strong>{_value(payment["order_id"])}</strong> has been updated.</p>
            <p><strong>New Status:</strong> {self._status_span(status)}</p>
            {self._payment_details(payment)}
            {self._signature("Thank you for your patience.")}
        """
        return subject, self._wrap(body)

    def payment_status_admin(self, payment: Dict[str, Any]) -> Email:
        status = payment["status"]
        subject = f"Payment Status Changed: Order ID {short_id(payment['order_id'])} - {status}"
        body = f"""
            <h2 style="color: #6a0dad;">Payment Status Change Notification!</h2>
            <p>Payment ID: <strong>{_value(payment["_id"])}</strong> for Order ID <strong>{_value(payment["order_id"])}</strong> (Client: {_value(payment["client_name"])}) has been updated to <strong>{_value(status)}</strong>.</p>
            <p><strong>Client Email:</strong> {_value(payment["client_email"])}</p>
            {self._payment_details(payment)}
            <p style="font-size: 0.9em; color: #555;">Please review the payment in your admin panel.</p>
        """
        return subject, self._wrap(body)

    # ==================== REFUNDS ====================

    def refund_requested_client(self, refund: Dict[str, Any]) -> Email:
        subject = "We Received Your Refund Request"
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(refund["client_name"])},</h2>
            <p>Your refund request for Order ID: <strong>{_value(refund["order_id"])}</strong> has been received.</p>
            <p><strong>Amount:</strong> {self._money(refund["amount"])}</p>
            <p><strong>Reason:</strong> {_value(refund["reason"])}</p>
            <p>Our team will review it and get back to you shortly.</p>
            {self._signature()}
        """
        return subject, self._wrap(body)

    def refund_requested_admin(self, refund: Dict[str, Any]) -> Email:
        subject = f"New Refund Request for Order ID: {short_id(refund['order_id'])}"
        body = f"""
            <h2 style="color: #6a0dad;">New Refund Request!</h2>
            <p>Refund ID: <strong>{_value(refund["_id"])}</strong> was requested for Order ID <strong>{_value(refund["order_id"])}</strong>.</p>
            <p><strong>Client Name:</strong> {_value(refund["client_name"])}</p>
            <p><strong>Client Email:</strong> {_value(refund["client_email"])}</p>
            <p><strong>Amount:</strong> {self._money(refund["amount"])}</p>
            <p><strong>Reason:</strong> {_value(refund["reason"])}</p>
            <p style="font-size: 0.9em; color: #555;">Please log in to your admin panel to review this refund.</p>
        """
        return subject, self._wrap(body)

    def refund_reviewed_client(self, refund: Dict[str, Any]) -> Email:
        status = refund["status"]
        outcome = "approved" if status == "Approved" else "rejected"
        subject = f"Your Refund Request Has Been {status}"
        remarks = refund.get("admin_remarks")
        remarks_html = f"<p><strong>Remarks:</strong> {_value(remarks)}</p>" if remarks else ""
        body = f"""
            <h2 style="color: #6a0dad;">Hello {_value(refund["client_name"])},</h2>
            <p>Your refund request for Order ID: <strong>{_value(refund["order_id"])}</strong> has been {outcome}.</p>
            <p><strong>Status:</strong> {self._status_span(status)}</p>
            <p><strong>Amount:</strong> {self._money(refund["amount"])}</p>
            {remarks_html}
            {self._signature()}
        """
        return subject, self._wrap(body)

    def refund_reviewed_admin(self, refund: Dict[str, Any]) -> Email:
        status = refund["status"]
        subject = f"Refund {status}: Order ID {short_id(refund['order_id'])}"
        body = f"""
            <h2 style="color: #6a0dad;">Refund Status Change Notification!</h2>
            <p>Refund ID: <strong>{_value(refund["_id"])}</strong> for Order ID <strong>{_value(refund["order_id"])}</strong> (Client: {_value(refund["client_name"])}) is now <strong>{_value(status)}</strong>.</p>
            <p><strong>Amount:</strong> {self._money(refund["amount"])}</p>
            <p><strong>Admin Remarks:</strong> {_value(refund.get("admin_remarks") or "N/A")}</p>
        """
        return subject, self._wrap(body)
