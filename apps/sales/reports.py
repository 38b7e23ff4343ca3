"""
Sales reporting functionality.

- Sales summary with daily totals
- Daily dashboard figures compared with yesterday
"""

from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from .models import Transaction


def _money(value):
    return str(Decimal(value or 0).quantize(Decimal("0.01")))


class SalesReportGenerator:
    """Generate sales reports from completed transactions."""

    def __init__(self, days=30):
        self.days = days

    def _completed(self):
        return Transaction.objects.filter(status=Transaction.COMPLETED)

    def get_sales_report(self):
        """
        Completed sales over the reporting window.

        Returns:
            dict: total_sales and transaction_count for the window plus
            sales_per_day, newest first
        """
        since = timezone.now() - timedelta(days=self.days)
        window = self._completed().filter(created_at__gte=since)

        totals = window.aggregate(total_sales=Sum("total"), transaction_count=Count("id"))

        per_day = (
            window.annotate(date=TruncDate("created_at"))
            .values("date")
            .annotate(total=Sum("total"), count=Count("id"))
            .order_by("-date")
        )

        return {
            "report_type": "sales_summary",
            "generated_at": timezone.now().isoformat(),
            "period_days": self.days,
            "total_sales": _money(totals["total_sales"]),
            "transaction_count": totals["transaction_count"],
            "sales_per_day": [
                {
                    "date": row["date"].isoformat(),
                    "total": _money(row["total"]),
                    "count": row["count"],
                }
                for row in per_day
            ],
        }

    def get_daily_dashboard(self, today=None):
        """
        Today's completed sales against yesterday's.

        ``trend`` is the percentage change of the sales total, or None when
        yesterday had no sales.
        """
        today = today or timezone.localdate()
        yesterday = today - timedelta(days=1)

        def figures(day):
            result = self._completed().filter(created_at__date=day).aggregate(
                total=Sum("total"), count=Count("id")
            )
            return Decimal(result["total"] or 0), result["count"]

        today_total, today_count = figures(today)
        yesterday_total, yesterday_count = figures(yesterday)

        if yesterday_total > 0:
            trend = ((today_total - yesterday_total) / yesterday_total * 100).quantize(
                Decimal("0.1")
            )
            trend = float(trend)
        else:
            trend = None

        if today_total > yesterday_total:
            direction = "up"
        elif today_total < yesterday_total:
            direction = "down"
        else:
            direction = "flat"

        return {
            "date": today.isoformat(),
            "today": {"total_sales": _money(today_total), "transaction_count": today_count},
            "yesterday": {
                "total_sales": _money(yesterday_total),
                "transaction_count": yesterday_count,
            },
            "trend_percentage": trend,
            "trend": direction,
        }
