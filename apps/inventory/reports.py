"""
Inventory reporting functionality.

- Inventory summary with stock valuation and daily movement
- Low stock report
"""

from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, IntegerField, Q, Sum
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone

from .models import InventoryMovement, Product


class InventoryReportGenerator:
    """Generate inventory reports across the active catalogue."""

    def __init__(self, days=30):
        """
        Args:
            days: Length of the movement history window in days
        """
        self.days = days

    def _active_products(self):
        return Product.objects.filter(is_active=True)

    def get_inventory_summary_report(self):
        """
        Generate the inventory summary.

        Returns:
            dict: totals, low stock and reorder counts, total stock value at
            selling price and per-day sales versus restocks for the window
        """
        products = self._active_products()

        counts = products.aggregate(
            total_products=Count("id"),
            low_stock_items=Count("id", filter=Q(stock__lte=F("low_stock_threshold"))),
            reorder_needed=Count("id", filter=Q(stock__lte=F("reorder_point"))),
            out_of_stock_items=Count("id", filter=Q(stock=0)),
            total_units=Coalesce(Sum("stock"), 0),
        )

        stock_value = products.aggregate(
            total=Sum(
                ExpressionWrapper(
                    F("stock") * F("price"),
                    output_field=DecimalField(max_digits=18, decimal_places=2),
                )
            )
        )["total"] or Decimal("0.00")

        return {
            "report_type": "inventory_summary",
            "generated_at": timezone.now().isoformat(),
            "summary": {
                **counts,
                "total_value": str(Decimal(stock_value).quantize(Decimal("0.01"))),
            },
            "stock_movement": self.get_daily_stock_movement(),
        }

    def get_daily_stock_movement(self):
        """
        Units sold versus units restocked per day, newest first.

        Sales are stored as negative deltas; they are reported as positive
        unit counts net of cancellations.
        """
        since = timezone.now() - timedelta(days=self.days)
        rows = (
            InventoryMovement.objects.filter(created_at__gte=since)
            .annotate(date=TruncDate("created_at"))
            .values("date")
            .annotate(
                sold=Coalesce(
                    Sum(
                        "quantity",
                        filter=Q(
                            reference_type__in=[
                                InventoryMovement.REF_SALE,
                                InventoryMovement.REF_CANCELLATION,
                            ]
                        ),
                    ),
                    0,
                    output_field=IntegerField(),
                ),
                restocked=Coalesce(
                    Sum("quantity", filter=Q(reference_type=InventoryMovement.REF_RESTOCK)),
                    0,
                    output_field=IntegerField(),
                ),
                adjusted=Coalesce(
                    Sum("quantity", filter=Q(reference_type=InventoryMovement.REF_ADJUSTMENT)),
                    0,
                    output_field=IntegerField(),
                ),
            )
            .order_by("-date")
        )

        return [
            {
                "date": row["date"].isoformat(),
                "sales": -row["sold"],
                "restocks": row["restocked"],
                "adjustments": row["adjusted"],
            }
            for row in rows
        ]

    def get_low_stock_report(self):
        """
        Products at or below their low stock threshold, emptiest first.

        Returns:
            dict: Report data with summary and details
        """
        queryset = (
            self._active_products()
            .filter(stock__lte=F("low_stock_threshold"))
            .select_related("category")
            .order_by("stock", "name")
        )

        items = []
        for product in queryset:
            items.append(
                {
                    "id": product.id,
                    "sku": product.sku,
                    "name": product.name,
                    "category": product.category.name if product.category else None,
                    "stock": product.stock,
                    "low_stock_threshold": product.low_stock_threshold,
                    "reorder_point": product.reorder_point,
                    "shortage": product.reorder_point - product.stock,
                    "stock_status": product.stock_status,
                }
            )

        return {
            "report_type": "low_stock",
            "generated_at": timezone.now().isoformat(),
            "summary": {
                "total_low_stock_items": len(items),
                "out_of_stock_items": sum(1 for item in items if item["stock"] == 0),
            },
            "items": items,
        }
