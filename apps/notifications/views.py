"""
Views for the notification system.

- List the current user's notifications
- Unread count
- Mark as read
"""

import logging

from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsCashierOrAbove

from .models import Notification
from .serializers import MarkReadSerializer, NotificationSerializer
from .services import get_unread_count, mark_notifications_as_read

logger = logging.getLogger(__name__)


class NotificationListView(generics.ListAPIView):
    """
    API endpoint for the current user's notifications, newest first.

    Query parameters:
    - unread_only: true to hide read notifications
    - type: filter by notification type
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsCashierOrAbove]

    def get_queryset(self):
        queryset = Notification.objects.filter(user=self.request.user)

        if self.request.query_params.get("unread_only") == "true":
            queryset = queryset.filter(is_read=False)

        notification_type = self.request.query_params.get("type")
        if notification_type:
            queryset = queryset.filter(notification_type=notification_type)

        return queryset


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def unread_count(request):
    return Response({"unread_count": get_unread_count(request.user)})


@api_view(["POST"])
@permission_classes([IsCashierOrAbove])
def mark_as_read(request):
    """
    Mark notifications as read.
    Accepts either specific notification IDs or marks all as read.
    """
    serializer = MarkReadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    count = mark_notifications_as_read(
        request.user, serializer.validated_data.get("notification_ids")
    )
    return Response(
        {"marked_count": count, "unread_count": get_unread_count(request.user)},
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([IsCashierOrAbove])
def mark_single_as_read(request, pk):
    """Mark one of the current user's notifications as read."""
    notification = get_object_or_404(Notification, pk=pk, user=request.user)
    notification.mark_as_read()
    return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)
