"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # Transactions
    path(
        "api/transactions/",
        views.TransactionListCreateView.as_view(),
        name="transaction_list",
    ),
    path(
        "api/transactions/<int:pk>/",
        views.TransactionDetailView.as_view(),
        name="transaction_detail",
    ),
    path(
        "api/transactions/<int:pk>/cancel/",
        views.transaction_cancel,
        name="transaction_cancel",
    ),
    path(
        "api/transactions/<int:pk>/receipt/",
        views.transaction_receipt,
        name="transaction_receipt",
    ),
    # Reports
    path("api/reports/sales/", views.sales_report, name="sales_report"),
    path("api/dashboard/daily-sales/", views.daily_sales_dashboard, name="daily_sales_dashboard"),
]
