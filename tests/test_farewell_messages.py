"""
Tests for farewell message management and selection.
"""

from datetime import datetime, timedelta

from django.urls import reverse
from django.utils import timezone

import pytest
from rest_framework import status

from apps.crm.models import FarewellMessage
from apps.crm.services import get_current_occasion, get_farewell_text, select_farewell_message


def aware(*args):
    return timezone.make_aware(datetime(*args))


class TestCurrentOccasion:
    """Occasion is derived from the local time of day and weekday."""

    @pytest.mark.parametrize(
        "moment, expected",
        [
            ((2026, 10, 19, 8, 30), FarewellMessage.MORNING),
            ((2026, 10, 19, 11, 59), FarewellMessage.MORNING),
            ((2026, 10, 19, 12, 0), FarewellMessage.AFTERNOON),
            ((2026, 10, 19, 17, 59), FarewellMessage.AFTERNOON),
            ((2026, 10, 19, 18, 0), FarewellMessage.EVENING),
            ((2026, 10, 17, 9, 0), FarewellMessage.WEEKEND),
            ((2026, 10, 18, 20, 0), FarewellMessage.WEEKEND),
        ],
    )
    def test_occasion_for_time(self, moment, expected):
        assert get_current_occasion(aware(*moment)) == expected


@pytest.mark.django_db
class TestFarewellSelection:
    """Test the language and occasion fallback chain."""

    monday_morning = (2026, 10, 19, 9, 0)

    def test_exact_language_and_occasion(self):
        FarewellMessage.objects.create(message="Buenos días", language="es", occasion="morning")
        FarewellMessage.objects.create(message="Adiós", language="es", occasion="general")

        message = select_farewell_message("es", when=aware(*self.monday_morning))

        assert message.message == "Buenos días"

    def test_falls_back_to_general_in_language(self):
        FarewellMessage.objects.create(message="Adiós", language="es", occasion="general")
        FarewellMessage.objects.create(message="Good morning", language="en", occasion="morning")

        message = select_farewell_message("es", "morning", when=aware(*self.monday_morning))

        assert message.message == "Adiós"

    def test_falls_back_to_english_general(self):
        FarewellMessage.objects.create(message="Goodbye", language="en", occasion="general")

        message = select_farewell_message("de", "evening")

        assert message.message == "Goodbye"

    def test_english_occasion_is_not_a_fallback_for_other_languages(self):
        FarewellMessage.objects.create(message="Good evening", language="en", occasion="evening")

        assert select_farewell_message("fr", "evening") is None

    def test_inactive_and_out_of_window_messages_are_skipped(self):
        now = timezone.now()
        FarewellMessage.objects.create(message="Off", language="en", is_active=False)
        FarewellMessage.objects.create(
            message="Expired", language="en", end_date=now - timedelta(days=1)
        )
        FarewellMessage.objects.create(
            message="Not yet", language="en", start_date=now + timedelta(days=1)
        )

        assert select_farewell_message("en", "general") is None

    def test_message_within_window(self):
        now = timezone.now()
        FarewellMessage.objects.create(
            message="Happy holidays",
            language="en",
            occasion="holiday",
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
        )

        message = select_farewell_message("en", "holiday")

        assert message.message == "Happy holidays"

    def test_random_choice_among_candidates(self):
        texts = {"One", "Two", "Three"}
        for text in texts:
            FarewellMessage.objects.create(message=text, language="en")

        picked = {select_farewell_message("en", "general").message for _ in range(20)}

        assert picked <= texts

    def test_default_text_when_nothing_matches(self):
        assert get_farewell_text("en") == "Thank you for your purchase!"


@pytest.mark.django_db
class TestFarewellMessageAPI:
    """Test the farewell message endpoints."""

    def test_create_sets_created_by(self, manager_client, manager):
        response = manager_client.post(
            reverse("crm:farewell_list"),
            {"message": "See you soon!", "language": "en", "occasion": "evening"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["created_by"] == manager.pk
        assert response.data["created_by_name"] == "manager1"

    def test_cashier_cannot_manage_messages(self, cashier_client):
        response = cashier_client.post(
            reverse("crm:farewell_list"), {"message": "Hi"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_end_date_must_follow_start_date(self, manager_client):
        start = timezone.now()

        response = manager_client.post(
            reverse("crm:farewell_list"),
            {
                "message": "Sale week",
                "start_date": start.isoformat(),
                "end_date": (start - timedelta(hours=1)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["end_date"] == ["End date must be after start date."]

    def test_invalid_language(self, manager_client):
        response = manager_client.post(
            reverse("crm:farewell_list"),
            {"message": "Ciao", "language": "it"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "language" in response.data

    def test_message_length_limit(self, manager_client):
        response = manager_client.post(
            reverse("crm:farewell_list"), {"message": "x" * 1001}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message" in response.data

    def test_list_filters(self, manager_client):
        FarewellMessage.objects.create(message="Bye", language="en", display_order=2)
        FarewellMessage.objects.create(message="Adiós", language="es", display_order=1)
        FarewellMessage.objects.create(message="Off", language="en", is_active=False)

        spanish = manager_client.get(reverse("crm:farewell_list"), {"language": "es"})
        active = manager_client.get(reverse("crm:farewell_list"), {"is_active": "true"})

        assert [m["message"] for m in spanish.data["results"]] == ["Adiós"]
        assert [m["message"] for m in active.data["results"]] == ["Adiós", "Bye"]

    def test_update_and_delete(self, manager_client):
        message = FarewellMessage.objects.create(message="Bye")
        url = reverse("crm:farewell_detail", args=[message.pk])

        updated = manager_client.patch(url, {"message": "Bye for now"}, format="json")
        deleted = manager_client.delete(url)

        assert updated.data["message"] == "Bye for now"
        assert deleted.status_code == status.HTTP_204_NO_CONTENT
        assert not FarewellMessage.objects.exists()

    def test_random_endpoint(self, cashier_client):
        FarewellMessage.objects.create(message="Goodbye", language="en", occasion="general")

        response = cashier_client.get(
            reverse("crm:farewell_random"), {"language": "tl", "occasion": "morning"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == "Goodbye"
        assert response.data["language"] == "en"

    def test_random_endpoint_default(self, cashier_client):
        response = cashier_client.get(reverse("crm:farewell_random"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"message": "Thank you for your purchase!"}

    def test_occasions_and_languages(self, cashier_client):
        occasions = cashier_client.get(reverse("crm:farewell_occasions"))
        languages = cashier_client.get(reverse("crm:farewell_languages"))

        assert occasions.data == [
            "general",
            "morning",
            "afternoon",
            "evening",
            "weekend",
            "holiday",
        ]
        assert languages.data["tl"] == "Tagalog"
        assert set(languages.data) == {"en", "es", "fr", "de", "tl"}

    def test_bulk_toggle(self, manager_client):
        first = FarewellMessage.objects.create(message="One")
        second = FarewellMessage.objects.create(message="Two")
        untouched = FarewellMessage.objects.create(message="Three")

        response = manager_client.post(
            reverse("crm:farewell_bulk_toggle"),
            {"ids": [first.pk, second.pk], "is_active": False},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"detail": "Messages updated successfully.", "updated": 2}
        assert list(
            FarewellMessage.objects.filter(is_active=False).order_by("pk").values_list(
                "pk", flat=True
            )
        ) == [first.pk, second.pk]
        untouched.refresh_from_db()
        assert untouched.is_active is True

    def test_bulk_toggle_unknown_ids(self, manager_client):
        message = FarewellMessage.objects.create(message="One")

        response = manager_client.post(
            reverse("crm:farewell_bulk_toggle"),
            {"ids": [message.pk, 99999], "is_active": False},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "ids" in response.data
        message.refresh_from_db()
        assert message.is_active is True

    def test_bulk_toggle_requires_ids(self, manager_client):
        response = manager_client.post(
            reverse("crm:farewell_bulk_toggle"), {"ids": [], "is_active": True}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
