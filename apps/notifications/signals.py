"""
Signal handlers for the notifications app.

Low stock events raised by the inventory service are handed to Celery once
the surrounding database transaction commits, so a rolled back sale never
triggers an alert.
"""

import logging

from django.db import transaction
from django.dispatch import receiver

from apps.inventory.signals import low_stock_detected

from .tasks import send_low_stock_alert_task

logger = logging.getLogger(__name__)


@receiver(low_stock_detected)
def queue_low_stock_alert(sender, product, previous_stock, current_stock, **kwargs):
    """Schedule the low stock alert task after commit."""
    logger.info(
        f"Low stock detected for {product.sku}: {previous_stock} -> {current_stock}, "
        f"alert queued"
    )
    product_id = product.pk
    transaction.on_commit(lambda: send_low_stock_alert_task.delay(product_id))
