"""
Tests for customer feedback submission and reporting.
"""

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone

import pytest
from rest_framework import status

from apps.crm.models import Feedback
from apps.crm.services import build_feedback_report
from apps.sales.models import Transaction
from apps.sales.services import cancel_transaction


def feedback_payload(txn, **overrides):
    payload = {
        "transaction_id": txn.pk,
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "rating": 5,
        "service_quality_rating": 4,
        "product_quality_rating": 4,
        "cleanliness_rating": 5,
        "staff_friendliness_rating": 5,
        "would_recommend": True,
        "areas_of_improvement": ["service_speed"],
        "comment": "Quick and friendly.",
    }
    payload.update(overrides)
    return payload


def create_feedback(txn, **overrides):
    data = {
        "rating": 5,
        "service_quality_rating": 5,
        "product_quality_rating": 5,
        "cleanliness_rating": 5,
        "staff_friendliness_rating": 5,
        "would_recommend": True,
    }
    data.update(overrides)
    return Feedback.objects.create(transaction=txn, **data)


@pytest.fixture
def completed_sale(make_sale, product):
    return make_sale([(product, 1)], payment_amount=Decimal("20.00"))


@pytest.mark.django_db
class TestFeedbackSubmission:
    """Test the feedback endpoint."""

    def test_submit_feedback(self, cashier_client, completed_sale):
        response = cashier_client.post(
            reverse("crm:feedback_list"), feedback_payload(completed_sale), format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["transaction_number"] == completed_sale.transaction_number
        assert response.data["average_rating"] == 4.6
        assert response.data["areas_of_improvement"] == ["service_speed"]
        assert Feedback.objects.filter(transaction=completed_sale).exists()

    def test_transaction_shows_feedback_flag(self, cashier_client, completed_sale):
        cashier_client.post(
            reverse("crm:feedback_list"), feedback_payload(completed_sale), format="json"
        )

        response = cashier_client.get(
            reverse("sales:transaction_detail", args=[completed_sale.pk])
        )

        assert response.data["has_feedback"] is True

    def test_feedback_only_once_per_transaction(self, cashier_client, completed_sale):
        url = reverse("crm:feedback_list")
        cashier_client.post(url, feedback_payload(completed_sale), format="json")

        response = cashier_client.post(url, feedback_payload(completed_sale), format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["transaction_id"] == [
            "Feedback has already been submitted for this transaction."
        ]

    def test_feedback_for_cancelled_transaction(self, cashier_client, completed_sale, manager):
        cancel_transaction(completed_sale, manager)

        response = cashier_client.post(
            reverse("crm:feedback_list"), feedback_payload(completed_sale), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["transaction_id"] == [
            "Feedback can only be submitted for completed transactions."
        ]

    def test_feedback_for_pending_transaction(self, cashier_client, cashier):
        pending = Transaction.objects.create(user=cashier, customer_name="Walk-in")

        response = cashier_client.post(
            reverse("crm:feedback_list"), feedback_payload(pending), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "transaction_id" in response.data

    def test_unknown_transaction(self, cashier_client, completed_sale):
        payload = feedback_payload(completed_sale, transaction_id=987654)

        response = cashier_client.post(reverse("crm:feedback_list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "transaction_id" in response.data

    @pytest.mark.parametrize("field", ["rating", "cleanliness_rating"])
    @pytest.mark.parametrize("value", [0, 6])
    def test_ratings_must_be_one_to_five(self, cashier_client, completed_sale, field, value):
        response = cashier_client.post(
            reverse("crm:feedback_list"),
            feedback_payload(completed_sale, **{field: value}),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_unknown_improvement_area(self, cashier_client, completed_sale):
        response = cashier_client.post(
            reverse("crm:feedback_list"),
            feedback_payload(completed_sale, areas_of_improvement=["parking"]),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "areas_of_improvement" in response.data

    def test_comment_length_limit(self, cashier_client, completed_sale):
        response = cashier_client.post(
            reverse("crm:feedback_list"),
            feedback_payload(completed_sale, comment="x" * 1001),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "comment" in response.data

    def test_anonymous_feedback_hides_contact(self, cashier_client, completed_sale):
        response = cashier_client.post(
            reverse("crm:feedback_list"),
            feedback_payload(completed_sale, is_anonymous=True),
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["customer_name"] == ""
        assert response.data["customer_email"] == ""
        stored = Feedback.objects.get(transaction=completed_sale)
        assert stored.is_anonymous is True
        assert stored.customer_name == ""
        assert stored.customer_email == ""


@pytest.mark.django_db
class TestFeedbackListing:
    """Test who may read feedback and the report."""

    def test_cashier_cannot_list_feedback(self, cashier_client):
        response = cashier_client.get(reverse("crm:feedback_list"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_lists_and_filters(self, manager_client, make_sale, product):
        create_feedback(make_sale([(product, 1)]), rating=5)
        create_feedback(make_sale([(product, 1)]), rating=2)

        everything = manager_client.get(reverse("crm:feedback_list"))
        low = manager_client.get(reverse("crm:feedback_list"), {"rating": 2})

        assert everything.status_code == status.HTTP_200_OK
        assert everything.data["pagination"]["total_items"] == 2
        assert [f["rating"] for f in low.data["results"]] == [2]

    def test_report(self, manager_client, make_sale, product):
        create_feedback(
            make_sale([(product, 1)]),
            rating=5,
            cleanliness_rating=4,
            areas_of_improvement=["service_speed", "price_value"],
            comment="Great",
        )
        create_feedback(
            make_sale([(product, 1)]),
            rating=3,
            cleanliness_rating=2,
            would_recommend=False,
            areas_of_improvement=["service_speed"],
        )

        response = manager_client.get(reverse("crm:feedback_report"))

        assert response.status_code == status.HTTP_200_OK
        data = response.data
        assert data["overall_stats"] == {
            "total_feedback": 2,
            "average_rating": 4.0,
            "recommendation_rate": 50.0,
        }
        assert data["rating_distribution"] == {3: 1, 5: 1}
        assert data["category_averages"]["cleanliness"] == 3.0
        assert data["category_averages"]["service_quality"] == 5.0
        assert data["improvement_areas"] == {"service_speed": 2, "price_value": 1}
        assert [c["comment"] for c in data["recent_comments"]] == ["Great"]

    def test_report_date_range(self, manager_client, make_sale, product):
        create_feedback(make_sale([(product, 1)]), rating=4)
        today = timezone.localdate()
        url = reverse("crm:feedback_report")

        current = manager_client.get(url, {"start_date": today, "end_date": today})
        past = manager_client.get(url, {"end_date": today - timedelta(days=1)})

        assert current.data["overall_stats"]["total_feedback"] == 1
        assert past.data["overall_stats"]["total_feedback"] == 0

    @pytest.mark.parametrize(
        "params, field",
        [
            ({"start_date": "2024-13-45"}, "start_date"),
            ({"end_date": "yesterday"}, "end_date"),
            ({"start_date": "2024-05-02", "end_date": "2024-05-01"}, "end_date"),
        ],
    )
    def test_report_invalid_dates(self, manager_client, params, field):
        response = manager_client.get(reverse("crm:feedback_report"), params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_report_with_no_feedback(self):
        report = build_feedback_report()

        assert report["overall_stats"] == {
            "total_feedback": 0,
            "average_rating": 0.0,
            "recommendation_rate": 0.0,
        }
        assert report["rating_distribution"] == {}

    def test_cashier_cannot_read_report(self, cashier_client):
        response = cashier_client.get(reverse("crm:feedback_report"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
