"""
URL configuration for CRM app.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    # Feedback
    path("api/feedback/", views.FeedbackListCreateView.as_view(), name="feedback_list"),
    path("api/feedback/report/", views.feedback_report, name="feedback_report"),
    # Farewell messages
    path(
        "api/farewell-messages/",
        views.FarewellMessageListCreateView.as_view(),
        name="farewell_list",
    ),
    path("api/farewell-messages/random/", views.farewell_random, name="farewell_random"),
    path(
        "api/farewell-messages/occasions/",
        views.farewell_occasions,
        name="farewell_occasions",
    ),
    path(
        "api/farewell-messages/languages/",
        views.farewell_languages,
        name="farewell_languages",
    ),
    path(
        "api/farewell-messages/bulk-toggle/",
        views.farewell_bulk_toggle,
        name="farewell_bulk_toggle",
    ),
    path(
        "api/farewell-messages/<int:pk>/",
        views.FarewellMessageDetailView.as_view(),
        name="farewell_detail",
    ),
]
