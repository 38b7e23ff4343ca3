"""
URL patterns for the notifications app.
"""

from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("api/notifications/", views.NotificationListView.as_view(), name="list"),
    path("api/notifications/unread-count/", views.unread_count, name="unread_count"),
    path("api/notifications/mark-read/", views.mark_as_read, name="mark_read"),
    path(
        "api/notifications/<int:pk>/mark-read/",
        views.mark_single_as_read,
        name="mark_single_read",
    ),
]
