"""
Serializers for CRM models.
"""

from rest_framework import serializers

from apps.sales.models import Transaction

from .models import FarewellMessage, Feedback


class FeedbackSerializer(serializers.ModelSerializer):
    """
    Serializer for submitting and listing customer feedback.

    Feedback is only accepted for completed transactions, once per
    transaction.
    """

    transaction_id = serializers.PrimaryKeyRelatedField(
        source="transaction",
        queryset=Transaction.objects.all(),
    )
    transaction_number = serializers.CharField(
        source="transaction.transaction_number", read_only=True
    )
    areas_of_improvement = serializers.ListField(
        child=serializers.ChoiceField(choices=Feedback.IMPROVEMENT_AREAS),
        required=False,
        allow_empty=True,
    )
    average_rating = serializers.FloatField(read_only=True)

    class Meta:
        model = Feedback
        fields = [
            "id",
            "transaction_id",
            "transaction_number",
            "customer_name",
            "customer_email",
            "rating",
            "service_quality_rating",
            "product_quality_rating",
            "cleanliness_rating",
            "staff_friendliness_rating",
            "average_rating",
            "would_recommend",
            "areas_of_improvement",
            "comment",
            "is_anonymous",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {
            "rating": {"min_value": 1, "max_value": 5},
            "service_quality_rating": {"min_value": 1, "max_value": 5},
            "product_quality_rating": {"min_value": 1, "max_value": 5},
            "cleanliness_rating": {"min_value": 1, "max_value": 5},
            "staff_friendliness_rating": {"min_value": 1, "max_value": 5},
            "comment": {"max_length": 1000},
        }

    def validate_transaction_id(self, value):
        if value.status != Transaction.COMPLETED:
            raise serializers.ValidationError(
                "Feedback can only be submitted for completed transactions."
            )
        if Feedback.objects.filter(transaction=value).exists():
            raise serializers.ValidationError(
                "Feedback has already been submitted for this transaction."
            )
        return value

    def validate(self, data):
        # Anonymous feedback keeps no contact details
        if data.get("is_anonymous"):
            data["customer_name"] = ""
            data["customer_email"] = ""
        return data


class FarewellMessageSerializer(serializers.ModelSerializer):
    """Serializer for FarewellMessage model."""

    created_by_name = serializers.CharField(
        source="created_by.username", read_only=True, default=None
    )

    class Meta:
        model = FarewellMessage
        fields = [
            "id",
            "message",
            "language",
            "occasion",
            "is_active",
            "start_date",
            "end_date",
            "display_order",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]
        extra_kwargs = {
            "message": {"max_length": 1000},
        }

    def validate(self, data):
        start_date = data.get("start_date", getattr(self.instance, "start_date", None))
        end_date = data.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return data


class FarewellBulkToggleSerializer(serializers.Serializer):
    """Serializer for activating or deactivating several messages at once."""

    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    is_active = serializers.BooleanField()

    def validate_ids(self, value):
        found = set(FarewellMessage.objects.filter(pk__in=value).values_list("pk", flat=True))
        missing = sorted(set(value) - found)
        if missing:
            raise serializers.ValidationError(f"Unknown message IDs: {missing}")
        return value


class FeedbackReportFilterSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, data):
        start_date = data.get("start_date")
        end_date = data.get("end_date")
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError(
                {"end_date": "End date must not be before start date."}
            )
        return data
