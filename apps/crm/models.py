"""
CRM models for the store.

- Customer feedback collected after a completed sale
- Farewell messages shown on receipts and at the register
"""

from django.core.validators import MaxLengthValidator, MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.models import User
from apps.sales.models import Transaction

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class Feedback(models.Model):
    """
    Customer feedback for a single completed transaction.

    One transaction has at most one feedback record. Ratings are 1-5; the
    overall ``rating`` is averaged with the four category ratings in
    ``average_rating``.
    """

    IMPROVEMENT_AREAS = [
        ("service_speed", "Service Speed"),
        ("staff_knowledge", "Staff Knowledge"),
        ("product_variety", "Product Variety"),
        ("product_quality", "Product Quality"),
        ("store_cleanliness", "Store Cleanliness"),
        ("price_value", "Price / Value"),
        ("store_layout", "Store Layout"),
        ("payment_process", "Payment Process"),
    ]

    CATEGORY_FIELDS = [
        ("service_quality", "service_quality_rating"),
        ("product_quality", "product_quality_rating"),
        ("cleanliness", "cleanliness_rating"),
        ("staff_friendliness", "staff_friendliness_rating"),
    ]

    transaction = models.OneToOneField(
        Transaction,
        on_delete=models.CASCADE,
        related_name="feedback",
        help_text="Transaction this feedback is about",
    )

    customer_name = models.CharField(max_length=255, blank=True)
    customer_email = models.EmailField(blank=True)

    # Ratings
    rating = models.PositiveSmallIntegerField(
        validators=RATING_VALIDATORS, help_text="Overall rating (1-5)"
    )
    service_quality_rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    product_quality_rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    cleanliness_rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    staff_friendliness_rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)

    would_recommend = models.BooleanField()

    areas_of_improvement = models.JSONField(
        default=list,
        blank=True,
        help_text="List of improvement area keys",
    )

    comment = models.TextField(
        blank=True,
        validators=[MaxLengthValidator(1000)],
    )

    is_anonymous = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "crm_feedback"
        ordering = ["-created_at"]
        verbose_name = "Feedback"
        verbose_name_plural = "Feedback"
        indexes = [
            models.Index(fields=["rating"], name="feedback_rating_idx"),
        ]

    def __str__(self):
        return f"Feedback {self.rating}/5 for {self.transaction.transaction_number}"

    @property
    def average_rating(self):
        """Mean of the overall and the four category ratings, one decimal place."""
        ratings = [self.rating] + [getattr(self, field) for _, field in self.CATEGORY_FIELDS]
        return round(sum(ratings) / len(ratings), 1)


class FarewellMessageQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def valid_at(self, when=None):
        """Active messages whose date window contains ``when``."""
        when = when or timezone.now()
        return self.active().filter(
            Q(start_date__isnull=True) | Q(start_date__lte=when),
            Q(end_date__isnull=True) | Q(end_date__gte=when),
        )


class FarewellMessage(models.Model):
    """
    A goodbye message shown to customers at checkout.

    Messages are picked at random per language and occasion, see
    ``apps.crm.services.select_farewell_message``.
    """

    LANGUAGE_CHOICES = [
        ("en", "English"),
        ("es", "Spanish"),
        ("fr", "French"),
        ("de", "German"),
        ("tl", "Tagalog"),
    ]

    GENERAL = "general"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"

    OCCASION_CHOICES = [
        (GENERAL, "General"),
        (MORNING, "Morning"),
        (AFTERNOON, "Afternoon"),
        (EVENING, "Evening"),
        (WEEKEND, "Weekend"),
        (HOLIDAY, "Holiday"),
    ]

    message = models.TextField(validators=[MaxLengthValidator(1000)])
    language = models.CharField(max_length=5, choices=LANGUAGE_CHOICES, default="en")
    occasion = models.CharField(max_length=20, choices=OCCASION_CHOICES, default=GENERAL)
    is_active = models.BooleanField(default=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    display_order = models.PositiveIntegerField(default=0)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="farewell_messages",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FarewellMessageQuerySet.as_manager()

    class Meta:
        db_table = "crm_farewell_messages"
        ordering = ["display_order", "-created_at"]
        verbose_name = "Farewell Message"
        verbose_name_plural = "Farewell Messages"
        indexes = [
            models.Index(
                fields=["language", "occasion", "is_active"],
                name="farewell_lookup_idx",
            ),
        ]

    def __str__(self):
        return f"[{self.language}/{self.occasion}] {self.message[:50]}"

    @classmethod
    def get_occasions(cls):
        return [key for key, _ in cls.OCCASION_CHOICES]

    @classmethod
    def get_languages(cls):
        return dict(cls.LANGUAGE_CHOICES)
