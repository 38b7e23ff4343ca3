"""
Notification services for creating and managing notifications.

This module provides utility functions for creating in-app notifications,
sending emails and fanning low stock alerts out to staff.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from apps.core.models import User
from apps.sales.receipt_service import ReceiptGenerator

from .models import EmailNotification, Notification

logger = logging.getLogger(__name__)

LOW_STOCK_TEMPLATE = "emails/low_stock_alert.html"
RECEIPT_TEMPLATE = "emails/transaction_receipt.html"


def create_notification(
    user: User,
    title: str,
    message: str,
    notification_type: str = Notification.INFO,
    action_url: str = "",
) -> Notification:
    """
    Create a new notification for a user.

    Args:
        user: User to receive the notification
        title: Notification title
        message: Notification message
        notification_type: Type of notification (default: 'INFO')
        action_url: Optional API path of the related record

    Returns:
        Created Notification instance

    Example:
        >>> from apps.notifications.services import create_notification
        >>> notification = create_notification(
        ...     user=user,
        ...     title='Low Stock Alert',
        ...     message='USB Cable is running low',
        ...     notification_type='LOW_STOCK',
        ...     action_url='/api/products/12/',
        ... )
    """
    notification = Notification.objects.create(
        user=user,
        title=title,
        message=message,
        notification_type=notification_type,
        action_url=action_url,
    )

    logger.info(
        f"Created notification '{title}' for user {user.username} (type: {notification_type})"
    )

    return notification


def get_unread_count(user: User) -> int:
    """Get count of unread notifications for a user."""
    return user.notifications.filter(is_read=False).count()


def mark_notifications_as_read(user: User, notification_ids: Optional[List[int]] = None) -> int:
    """
    Mark notifications as read for a user.

    Args:
        user: User whose notifications to mark as read
        notification_ids: Optional list of specific notification IDs to mark as read.
                         If None, marks all unread notifications as read.

    Returns:
        Number of notifications marked as read
    """
    queryset = user.notifications.filter(is_read=False)

    if notification_ids:
        queryset = queryset.filter(id__in=notification_ids)

    count = queryset.update(is_read=True, read_at=timezone.now())

    logger.info(f"Marked {count} notifications as read for user {user.username}")

    return count


def cleanup_read_notifications(days: int = 30) -> int:
    """
    Delete notifications that were read more than ``days`` ago.

    Returns:
        Number of notifications deleted
    """
    cutoff = timezone.now() - timedelta(days=days)
    deleted_count, _ = Notification.objects.filter(is_read=True, read_at__lt=cutoff).delete()

    logger.info(f"Cleaned up {deleted_count} read notifications older than {days} days")

    return deleted_count


def send_email(
    to_email: str,
    subject: str,
    template_name: str,
    context: Dict,
    email_type: str = EmailNotification.SYSTEM,
    user: Optional[User] = None,
    notification: Optional[Notification] = None,
) -> EmailNotification:
    """
    Render a template and send it as an HTML email with a plain text part.

    The attempt is recorded as an EmailNotification. A delivery failure is
    recorded on it and then re-raised so the calling task can retry.
    """
    html_body = render_to_string(template_name, context)
    return send_rendered_email(
        to_email,
        subject,
        html_body,
        template_name=template_name,
        email_type=email_type,
        user=user,
        notification=notification,
    )


def send_rendered_email(
    to_email: str,
    subject: str,
    html_body: str,
    template_name: str = "",
    email_type: str = EmailNotification.SYSTEM,
    user: Optional[User] = None,
    notification: Optional[Notification] = None,
) -> EmailNotification:
    """Send an already rendered HTML body, see ``send_email``."""
    email_notification = EmailNotification.objects.create(
        user=user,
        notification=notification,
        subject=subject,
        to_email=to_email,
        from_email=settings.DEFAULT_FROM_EMAIL,
        template_name=template_name,
        email_type=email_type,
    )

    msg = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html_body),
        from_email=email_notification.from_email,
        to=[to_email],
    )
    msg.attach_alternative(html_body, "text/html")

    try:
        msg.send()
    except Exception as e:
        email_notification.update_status(EmailNotification.FAILED, error_message=str(e))
        logger.error(f"Failed to send email to {to_email}: {e}", exc_info=True)
        raise

    email_notification.update_status(EmailNotification.SENT)
    logger.info(f"Email '{subject}' sent to {to_email}")

    return email_notification


def get_stock_alert_recipients():
    """Active administrators and managers."""
    return User.objects.filter(
        is_active=True,
        role__in=[User.ADMINISTRATOR, User.MANAGER],
    ).order_by("id")


def _product_context(product) -> Dict:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "stock": product.stock,
        "low_stock_threshold": product.low_stock_threshold,
        "reorder_point": product.reorder_point,
        "stock_status": product.stock_status,
    }


def notify_low_stock(products) -> int:
    """
    Alert staff about products at or below their low stock threshold.

    Every active administrator and manager gets an in-app notification;
    those with an email address also get the alert email.

    Args:
        products: list of Product instances

    Returns:
        Number of staff notified
    """
    products = list(products)
    if not products:
        return 0

    if len(products) == 1:
        product = products[0]
        title = f"Low stock: {product.name}"
        message = (
            f"{product.name} ({product.sku}) has {product.stock} left, "
            f"threshold {product.low_stock_threshold}."
        )
        action_url = f"/api/products/{product.id}/"
    else:
        title = f"Low stock: {len(products)} products"
        message = ", ".join(f"{p.name} ({p.stock})" for p in products)
        action_url = "/api/reports/low-stock/"

    for product in products:
        logger.warning(
            f"Low stock alert: {product.sku} at {product.stock} "
            f"(threshold {product.low_stock_threshold})"
        )

    context = {
        "products": [_product_context(p) for p in products],
        "store_name": settings.POS_STORE_NAME,
        "generated_at": timezone.now(),
    }

    recipients = list(get_stock_alert_recipients())
    for user in recipients:
        notification = create_notification(
            user=user,
            title=title,
            message=message,
            notification_type=Notification.LOW_STOCK,
            action_url=action_url,
        )
        if user.email:
            send_email(
                to_email=user.email,
                subject=title,
                template_name=LOW_STOCK_TEMPLATE,
                context={**context, "user": user},
                email_type=EmailNotification.LOW_STOCK,
                user=user,
                notification=notification,
            )

    return len(recipients)


def send_transaction_receipt(transaction) -> Optional[EmailNotification]:
    """
    Email the receipt for a transaction to its customer.

    Returns None when the transaction has no customer email.
    """
    if not transaction.customer_email:
        return None

    html_body = ReceiptGenerator(transaction).generate_html_receipt()
    return send_rendered_email(
        to_email=transaction.customer_email,
        subject=f"Your receipt {transaction.transaction_number} from {settings.POS_STORE_NAME}",
        html_body=html_body,
        template_name=RECEIPT_TEMPLATE,
        email_type=EmailNotification.RECEIPT,
    )
