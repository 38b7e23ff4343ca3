"""
Receipt generation service for the register.

- JSON receipt payload for the front-end to print
- HTML receipt body for the customer e-mail
"""

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone

from apps.crm.services import get_farewell_text

from .models import Transaction


class ReceiptGenerator:
    """
    Receipt generator for sales transactions.

    Supports two outputs:
    - ``build_receipt`` returns a plain dict for the API
    - ``generate_html_receipt`` renders the e-mail template
    """

    template_name = "emails/transaction_receipt.html"

    def __init__(self, transaction: Transaction, language: str = "en"):
        """Initialize receipt generator with transaction data."""
        self.transaction = transaction
        self.language = language

    def get_store_info(self) -> dict:
        return {
            "name": settings.POS_STORE_NAME,
            "address": settings.POS_STORE_ADDRESS,
            "phone": settings.POS_STORE_PHONE,
            "email": settings.POS_STORE_EMAIL,
        }

    def _build_items(self) -> list:
        return [
            {
                "product_id": item.product_id,
                "name": item.product.name,
                "sku": item.product.sku,
                "quantity": item.quantity,
                "price": str(item.price),
                "subtotal": str(item.subtotal),
            }
            for item in self.transaction.items.select_related("product")
        ]

    def build_receipt(self) -> dict:
        """
        Build the receipt payload.

        Returns:
            dict with store info, transaction header, items, totals, payment
            and a farewell message for the footer
        """
        txn = self.transaction
        cashier = txn.user.get_full_name() or txn.user.username

        return {
            "store": self.get_store_info(),
            "transaction_number": txn.transaction_number,
            "date": timezone.localtime(txn.created_at).isoformat(),
            "status": txn.status,
            "cashier": cashier,
            "customer": {
                "name": txn.customer_name,
                "email": txn.customer_email,
                "phone": txn.customer_phone,
            },
            "items": self._build_items(),
            "totals": {
                "subtotal": str(txn.subtotal),
                "tax": str(txn.tax),
                "tax_rate": str(settings.POS_TAX_RATE),
                "total": str(txn.total),
            },
            "payment": {
                "method": txn.payment_method,
                "method_display": txn.get_payment_method_display(),
                "amount": str(txn.payment_amount),
                "change": str(txn.change_amount),
            },
            "farewell_message": get_farewell_text(language=self.language),
        }

    def generate_html_receipt(self) -> str:
        """
        Generate the HTML receipt for e-mail.

        Returns:
            HTML string
        """
        receipt = self.build_receipt()
        context = {
            "receipt": receipt,
            "transaction": self.transaction,
            "store": receipt["store"],
            "current_time": timezone.now(),
        }
        return render_to_string(self.template_name, context)
