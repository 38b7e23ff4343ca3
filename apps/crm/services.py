"""
Farewell message selection and feedback reporting.
"""

import random
from collections import Counter

from django.conf import settings
from django.db.models import Avg, Count
from django.utils import timezone

from .models import FarewellMessage, Feedback

DEFAULT_FAREWELL = "Thank you for your purchase!"


def get_current_occasion(now=None):
    """
    Occasion for the given local time.

    Saturday and Sunday are ``weekend``; otherwise before 12:00 is
    ``morning``, before 18:00 ``afternoon`` and later ``evening``.
    """
    now = timezone.localtime(now) if now else timezone.localtime()
    if now.weekday() >= 5:
        return FarewellMessage.WEEKEND
    if now.hour < 12:
        return FarewellMessage.MORNING
    if now.hour < 18:
        return FarewellMessage.AFTERNOON
    return FarewellMessage.EVENING


def _random_message(language, occasion, when):
    ids = list(
        FarewellMessage.objects.valid_at(when)
        .filter(language=language, occasion=occasion)
        .values_list("id", flat=True)
    )
    if not ids:
        return None
    return FarewellMessage.objects.get(pk=random.choice(ids))


def select_farewell_message(language="en", occasion=None, when=None):
    """
    Pick a random farewell message valid now.

    Tries (language, occasion), then (language, general), then
    (en, general). Returns None when nothing matches.
    """
    when = when or timezone.now()
    occasion = occasion or get_current_occasion(when)

    candidates = [
        (language, occasion),
        (language, FarewellMessage.GENERAL),
        ("en", FarewellMessage.GENERAL),
    ]
    seen = set()
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        message = _random_message(*candidate, when)
        if message is not None:
            return message
    return None


def default_farewell_text():
    return getattr(settings, "POS_DEFAULT_FAREWELL_MESSAGE", DEFAULT_FAREWELL)


def get_farewell_text(language="en", occasion=None):
    """Message text for a receipt, falling back to the default farewell."""
    message = select_farewell_message(language, occasion)
    if message is None:
        return default_farewell_text()
    return message.message


def _round(value):
    return round(value, 1) if value is not None else 0.0


def build_feedback_report(start_date=None, end_date=None):
    """
    Aggregate feedback for the report endpoint.

    Args:
        start_date: optional date, inclusive
        end_date: optional date, inclusive
    """
    queryset = Feedback.objects.all()
    if start_date:
        queryset = queryset.filter(created_at__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__date__lte=end_date)

    total = queryset.count()
    recommended = queryset.filter(would_recommend=True).count()

    averages = queryset.aggregate(
        overall=Avg("rating"),
        **{name: Avg(field) for name, field in Feedback.CATEGORY_FIELDS},
    )

    distribution = {
        row["rating"]: row["count"]
        for row in queryset.values("rating").annotate(count=Count("id")).order_by("rating")
    }

    areas = Counter()
    for selected in queryset.values_list("areas_of_improvement", flat=True):
        areas.update(selected or [])

    recent_comments = [
        {
            "rating": feedback.rating,
            "comment": feedback.comment,
            "date": timezone.localtime(feedback.created_at).strftime("%Y-%m-%d %H:%M:%S"),
        }
        for feedback in queryset.exclude(comment="").order_by("-created_at")[:10]
    ]

    return {
        "overall_stats": {
            "total_feedback": total,
            "average_rating": _round(averages["overall"]),
            "recommendation_rate": round(recommended / max(total, 1) * 100, 1),
        },
        "rating_distribution": distribution,
        "category_averages": {
            name: _round(averages[name]) for name, _ in Feedback.CATEGORY_FIELDS
        },
        "improvement_areas": dict(areas.most_common()),
        "recent_comments": recent_comments,
    }
