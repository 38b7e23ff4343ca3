"""
Views for sales transactions.

- Transaction list, create and detail
- Cancellation with stock restore
- Receipt payload
- Sales report and daily dashboard
"""

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404

from django_fsm import TransitionNotAllowed
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsCashierOrAbove, IsManagerOrAbove

from .models import Transaction
from .receipt_service import ReceiptGenerator
from .reports import SalesReportGenerator
from .serializers import (
    TransactionCancelSerializer,
    TransactionCreateSerializer,
    TransactionDetailSerializer,
    TransactionFilterSerializer,
    TransactionListSerializer,
)
from .services import TransactionStateError, cancel_transaction

logger = logging.getLogger(__name__)


class TransactionListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and creating transactions.

    Query parameters:
    - search: Search by transaction number, customer name or e-mail
    - status: Filter by status
    - payment_method: Filter by payment method
    - date_from: Filter by date (YYYY-MM-DD)
    - date_to: Filter by date (YYYY-MM-DD)

    Request body for POST:
    {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "" (optional),
        "items": [{"product_id": 1, "quantity": 2}],
        "payment_method": "cash|card",
        "payment_amount": "50.00" (optional, defaults to the total)
    }
    """

    permission_classes = [IsCashierOrAbove]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "total", "transaction_number"]
    ordering = ["-created_at"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return TransactionCreateSerializer
        return TransactionListSerializer

    def get_queryset(self):
        queryset = Transaction.objects.select_related("user").prefetch_related("items")

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(transaction_number__icontains=search)
                | Q(customer_name__icontains=search)
                | Q(customer_email__icontains=search)
            )

        txn_status = self.request.query_params.get("status")
        if txn_status:
            queryset = queryset.filter(status=txn_status)

        payment_method = self.request.query_params.get("payment_method")
        if payment_method:
            queryset = queryset.filter(payment_method=payment_method)

        date_range = TransactionFilterSerializer(data=self.request.query_params)
        date_range.is_valid(raise_exception=True)

        date_from = date_range.validated_data.get("date_from")
        if date_from:
            queryset = queryset.filter(created_at__date__gte=date_from)

        date_to = date_range.validated_data.get("date_to")
        if date_to:
            queryset = queryset.filter(created_at__date__lte=date_to)

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        txn = serializer.save()
        return Response(
            TransactionDetailSerializer(txn).data,
            status=status.HTTP_201_CREATED,
        )


class TransactionDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single transaction with its items.
    """

    queryset = Transaction.objects.select_related("user", "cancelled_by").prefetch_related(
        "items__product"
    )
    serializer_class = TransactionDetailSerializer
    permission_classes = [IsCashierOrAbove]


@api_view(["POST"])
@permission_classes([IsCashierOrAbove])
def transaction_cancel(request, pk):
    """
    Cancel a transaction and restore its stock.

    Request body:
    {
        "reason": "<optional>"
    }
    """
    txn = get_object_or_404(Transaction, pk=pk)

    serializer = TransactionCancelSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        txn = cancel_transaction(
            txn, request.user, reason=serializer.validated_data.get("reason", "")
        )
    except (TransactionStateError, TransitionNotAllowed) as e:
        logger.warning(f"Cancel of transaction {pk} refused: {e}")
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    txn = Transaction.objects.prefetch_related("items__product").get(pk=txn.pk)
    return Response(TransactionDetailSerializer(txn).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def transaction_receipt(request, pk):
    """
    Receipt payload for printing.

    Query parameters:
    - language: language of the farewell message (default: en)
    """
    txn = get_object_or_404(Transaction.objects.select_related("user"), pk=pk)
    language = request.query_params.get("language", "en")
    return Response(ReceiptGenerator(txn, language=language).build_receipt())


@api_view(["GET"])
@permission_classes([IsManagerOrAbove])
def sales_report(request):
    """
    Completed sales for the last 30 days with a per-day breakdown.
    """
    generator = SalesReportGenerator()
    return Response(generator.get_sales_report(), status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([IsManagerOrAbove])
def daily_sales_dashboard(request):
    """
    Today's sales total and count with the trend against yesterday.
    """
    generator = SalesReportGenerator()
    return Response(generator.get_daily_dashboard(), status=status.HTTP_200_OK)
