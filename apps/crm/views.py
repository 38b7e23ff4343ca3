"""
Views for CRM functionality.

- Feedback submission, listing and report
- Farewell message management and random selection at checkout
"""

import logging

from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsCashierOrAbove, IsManagerOrAbove

from .models import FarewellMessage, Feedback
from .serializers import (
    FarewellBulkToggleSerializer,
    FarewellMessageSerializer,
    FeedbackReportFilterSerializer,
    FeedbackSerializer,
)
from .services import build_feedback_report, default_farewell_text, select_farewell_message

logger = logging.getLogger(__name__)

TRUTHY = ["true", "1", "yes"]


# Feedback Views


class FeedbackListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for submitting feedback (all roles) and listing it (managers).
    """

    serializer_class = FeedbackSerializer

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsCashierOrAbove()]
        return [IsManagerOrAbove()]

    def get_queryset(self):
        queryset = Feedback.objects.select_related("transaction")

        rating = self.request.query_params.get("rating")
        if rating:
            queryset = queryset.filter(rating=rating)

        return queryset

    def perform_create(self, serializer):
        feedback = serializer.save()
        logger.info(
            f"Feedback {feedback.rating}/5 recorded for "
            f"{feedback.transaction.transaction_number}"
        )


@api_view(["GET"])
@permission_classes([IsManagerOrAbove])
def feedback_report(request):
    """
    Feedback statistics.

    Query parameters:
    - start_date: YYYY-MM-DD (optional)
    - end_date: YYYY-MM-DD (optional)
    """
    filters = FeedbackReportFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    report = build_feedback_report(
        start_date=filters.validated_data.get("start_date"),
        end_date=filters.validated_data.get("end_date"),
    )
    return Response(report, status=status.HTTP_200_OK)


# Farewell Message Views


class FarewellMessageListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and creating farewell messages.

    Query parameters:
    - language: Filter by language code
    - occasion: Filter by occasion
    - is_active: Filter by active flag
    """

    serializer_class = FarewellMessageSerializer
    permission_classes = [IsManagerOrAbove]

    def get_queryset(self):
        queryset = FarewellMessage.objects.select_related("created_by")

        language = self.request.query_params.get("language")
        if language:
            queryset = queryset.filter(language=language)

        occasion = self.request.query_params.get("occasion")
        if occasion:
            queryset = queryset.filter(occasion=occasion)

        is_active = self.request.query_params.get("is_active")
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() in TRUTHY)

        return queryset.order_by("display_order", "-created_at")

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


class FarewellMessageDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deleting a farewell message.
    """

    queryset = FarewellMessage.objects.select_related("created_by")
    serializer_class = FarewellMessageSerializer
    permission_classes = [IsManagerOrAbove]


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def farewell_random(request):
    """
    A random active farewell message.

    Query parameters:
    - language: default en
    - occasion: defaults to the occasion for the current local time

    Falls back to the general occasion, then to English, then to a fixed
    thank-you text.
    """
    language = request.query_params.get("language", "en")
    occasion = request.query_params.get("occasion")

    message = select_farewell_message(language=language, occasion=occasion)
    if message is None:
        return Response({"message": default_farewell_text()})

    return Response(FarewellMessageSerializer(message).data)


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def farewell_occasions(request):
    return Response(FarewellMessage.get_occasions())


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def farewell_languages(request):
    return Response(FarewellMessage.get_languages())


@api_view(["POST"])
@permission_classes([IsManagerOrAbove])
def farewell_bulk_toggle(request):
    """
    Activate or deactivate several messages.

    Request body:
    {
        "ids": [1, 2, 3],
        "is_active": true
    }
    """
    serializer = FarewellBulkToggleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    updated = FarewellMessage.objects.filter(pk__in=serializer.validated_data["ids"]).update(
        is_active=serializer.validated_data["is_active"]
    )
    logger.info(f"{request.user.username} set is_active on {updated} farewell message(s)")

    return Response({"detail": "Messages updated successfully.", "updated": updated})
