"""
Tests for the register: sales, cancellations, receipts and sales reports.
"""

from datetime import timedelta
from decimal import Decimal

from django.core import mail
from django.urls import reverse
from django.utils import timezone

import pytest
from django_fsm import TransitionNotAllowed
from rest_framework import status

from apps.crm.models import FarewellMessage
from apps.inventory.models import InventoryMovement, Product
from apps.notifications.models import EmailNotification
from apps.sales.models import Transaction, TransactionItem, round_money
from apps.sales.receipt_service import ReceiptGenerator
from apps.sales.reports import SalesReportGenerator
from apps.sales.services import (
    StockShortageError,
    TransactionStateError,
    cancel_transaction,
    create_transaction,
    merge_lines,
)


def sale_payload(*lines, **overrides):
    payload = {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-123-4567",
        "items": [{"product_id": product.pk, "quantity": qty} for product, qty in lines],
        "payment_method": Transaction.CASH,
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestTransactionModel:
    """Test totals and the status machine on the model."""

    def test_round_money_half_up(self):
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")
        assert round_money(Decimal("1.004")) == Decimal("1.00")

    def test_transaction_number_from_primary_key(self, cashier):
        txn = Transaction.objects.create(user=cashier, customer_name="Walk-in")

        assert txn.transaction_number == f"TXN-{txn.pk:08d}"
        assert Transaction.objects.get(pk=txn.pk).transaction_number == txn.transaction_number

    def test_calculate_totals(self, cashier, product, second_product):
        txn = Transaction.objects.create(
            user=cashier, customer_name="Walk-in", payment_amount=Decimal("50.00")
        )
        TransactionItem.objects.create(
            transaction=txn, product=product, quantity=2, price=product.price
        )
        TransactionItem.objects.create(
            transaction=txn, product=second_product, quantity=3, price=second_product.price
        )

        txn.calculate_totals(Decimal("0.10"))

        assert txn.subtotal == Decimal("27.50")
        assert txn.tax == Decimal("2.75")
        assert txn.total == Decimal("30.25")
        assert txn.change_amount == Decimal("19.75")
        assert sum(item.quantity for item in txn.items.all()) == 5

    def test_item_subtotal_computed_on_save(self, cashier, product):
        txn = Transaction.objects.create(user=cashier, customer_name="Walk-in")
        item = TransactionItem.objects.create(
            transaction=txn, product=product, quantity=3, price=Decimal("10.00")
        )

        assert item.subtotal == Decimal("30.00")

    def test_complete_only_from_pending(self, cashier):
        txn = Transaction.objects.create(user=cashier, customer_name="Walk-in")
        txn.complete()

        assert txn.status == Transaction.COMPLETED
        assert txn.completed_at is not None
        with pytest.raises(TransitionNotAllowed):
            txn.complete()

    def test_cancelled_transaction_cannot_be_cancelled_again(self, cashier):
        txn = Transaction.objects.create(user=cashier, customer_name="Walk-in")
        txn.cancel(user=cashier, reason="Mistake")

        assert txn.status == Transaction.CANCELLED
        assert not txn.can_be_cancelled()
        with pytest.raises(TransitionNotAllowed):
            txn.cancel(user=cashier)


@pytest.mark.django_db
class TestCreateTransactionService:
    """Test the sale service directly."""

    def test_sale_deducts_stock_and_logs_movements(self, make_sale, cashier, product):
        txn = make_sale([(product, 2)], payment_amount=Decimal("50.00"))

        assert txn.status == Transaction.COMPLETED
        assert txn.subtotal == Decimal("20.00")
        assert txn.tax == Decimal("2.00")
        assert txn.total == Decimal("22.00")
        assert txn.change_amount == Decimal("28.00")

        product.refresh_from_db()
        assert product.stock == 18

        movement = InventoryMovement.objects.get(reference_type=InventoryMovement.REF_SALE)
        assert movement.quantity == -2
        assert movement.reference_id == txn.pk
        assert movement.user == cashier

    def test_item_price_is_captured_at_sale_time(self, make_sale, product):
        txn = make_sale([(product, 1)])
        Product.objects.filter(pk=product.pk).update(price=Decimal("99.00"))

        item = txn.items.get()
        assert item.price == Decimal("10.00")
        assert item.subtotal == Decimal("10.00")

    def test_payment_defaults_to_total(self, make_sale, product):
        txn = make_sale([(product, 1)], payment_method=Transaction.CARD)

        assert txn.payment_amount == Decimal("11.00")
        assert txn.change_amount == Decimal("0.00")

    def test_underpayment_is_accepted_without_change(self, make_sale, product):
        txn = make_sale([(product, 2)], payment_amount=Decimal("5.00"))

        assert txn.change_amount == Decimal("0.00")
        assert txn.payment_amount < txn.total

    def test_tax_is_rounded_half_up(self, make_sale, category):
        cheap = Product.objects.create(
            name="Candy", sku="CND-1", price=Decimal("0.05"), stock=10, low_stock_threshold=0
        )

        txn = make_sale([(cheap, 1)])

        assert txn.tax == Decimal("0.01")
        assert txn.total == Decimal("0.06")

    def test_duplicate_lines_are_merged(self, make_sale, product):
        txn = make_sale([(product, 2), (product, 3)])

        assert txn.items.count() == 1
        assert txn.items.get().quantity == 5
        product.refresh_from_db()
        assert product.stock == 15

    def test_merge_lines_keeps_order(self, product, second_product):
        merged = merge_lines([(second_product, 1), (product, 2), (second_product, 4)])

        assert list(merged.keys()) == [second_product.pk, product.pk]
        assert merged[second_product.pk][1] == 5

    def test_shortage_rolls_back_whole_sale(self, cashier, product, second_product):
        with pytest.raises(StockShortageError) as excinfo:
            create_transaction(
                user=cashier,
                items=[(product, 2), (second_product, 101)],
                customer_name="Jane Doe",
            )

        assert excinfo.value.shortages == {
            second_product.pk: {"requested": 101, "available": 100}
        }
        assert not Transaction.objects.exists()
        assert not InventoryMovement.objects.exists()
        product.refresh_from_db()
        assert product.stock == 20

    def test_merged_quantity_is_checked(self, cashier, product):
        with pytest.raises(StockShortageError) as excinfo:
            create_transaction(
                user=cashier, items=[(product, 15), (product, 15)], customer_name="Jane Doe"
            )

        assert excinfo.value.shortages[product.pk]["requested"] == 30

    def test_inactive_product_cannot_be_sold(self, cashier, product):
        Product.objects.filter(pk=product.pk).update(is_active=False)

        with pytest.raises(ValueError):
            create_transaction(user=cashier, items=[(product, 1)], customer_name="Jane Doe")

    def test_empty_sale_is_rejected(self, cashier):
        with pytest.raises(ValueError):
            create_transaction(user=cashier, items=[], customer_name="Jane Doe")

    def test_receipt_email_sent_after_commit(
        self, make_sale, product, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            txn = make_sale([(product, 1)], customer_email="jane@example.com")

        assert len(callbacks) == 1
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["jane@example.com"]
        assert message.subject == f"Your receipt {txn.transaction_number} from Test Store"
        html_body = message.alternatives[0][0]
        assert txn.transaction_number in html_body
        assert "Orange Juice 1L" in html_body

        email = EmailNotification.objects.get()
        assert email.email_type == EmailNotification.RECEIPT
        assert email.status == EmailNotification.SENT

    def test_no_receipt_without_email(
        self, make_sale, product, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            make_sale([(product, 1)], customer_email="")

        assert callbacks == []
        assert mail.outbox == []


@pytest.mark.django_db
class TestCancelTransactionService:
    """Test cancellation and stock restore."""

    def test_cancel_restores_stock(self, make_sale, manager, product, second_product):
        txn = make_sale([(product, 2), (second_product, 4)])

        cancelled = cancel_transaction(txn, manager, reason="Customer changed mind")

        assert cancelled.status == Transaction.CANCELLED
        assert cancelled.cancelled_by == manager
        assert cancelled.cancellation_reason == "Customer changed mind"
        product.refresh_from_db()
        second_product.refresh_from_db()
        assert product.stock == 20
        assert second_product.stock == 100

        restores = InventoryMovement.objects.filter(
            reference_type=InventoryMovement.REF_CANCELLATION, reference_id=txn.pk
        )
        assert sorted(m.quantity for m in restores) == [2, 4]

    def test_cancel_twice_is_refused(self, make_sale, manager, product):
        txn = make_sale([(product, 2)])
        cancel_transaction(txn, manager)

        with pytest.raises(TransactionStateError):
            cancel_transaction(txn, manager)

        product.refresh_from_db()
        assert product.stock == 20

    def test_cancel_pending_does_not_touch_stock(self, cashier, product):
        txn = Transaction.objects.create(user=cashier, customer_name="Walk-in")

        cancelled = cancel_transaction(txn, cashier)

        assert cancelled.status == Transaction.CANCELLED
        assert not InventoryMovement.objects.exists()


@pytest.mark.django_db
class TestTransactionAPI:
    """Test the transaction endpoints."""

    def test_create_transaction(self, cashier_client, product, second_product):
        response = cashier_client.post(
            reverse("sales:transaction_list"),
            sale_payload((product, 2), (second_product, 2), payment_amount="30.00"),
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.data
        assert data["status"] == Transaction.COMPLETED
        assert data["transaction_number"].startswith("TXN-")
        assert data["subtotal"] == "25.00"
        assert data["tax"] == "2.50"
        assert data["total"] == "27.50"
        assert data["change_amount"] == "2.50"
        assert data["cashier_username"] == "cashier1"
        assert data["cashier_name"] == "Carl Reyes"
        assert len(data["items"]) == 2
        assert data["has_feedback"] is False

    def test_oversell_reports_line_errors(self, cashier_client, product, second_product):
        response = cashier_client.post(
            reverse("sales:transaction_list"),
            sale_payload((product, 2), (second_product, 150)),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        errors = response.data["items"]
        assert errors[0] == {}
        assert errors[1]["quantity"][0] == "Insufficient stock. Available: 100, Requested: 150"
        assert not Transaction.objects.exists()
        product.refresh_from_db()
        assert product.stock == 20

    def test_inactive_product_line_error(self, cashier_client, product):
        Product.objects.filter(pk=product.pk).update(is_active=False)

        response = cashier_client.post(
            reverse("sales:transaction_list"), sale_payload((product, 1)), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["items"][0]["product_id"][0] == "Product not found or inactive."

    def test_empty_items(self, cashier_client):
        response = cashier_client.post(
            reverse("sales:transaction_list"), sale_payload(), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "At least one item is required." in response.data["items"]

    def test_zero_quantity(self, cashier_client, product):
        response = cashier_client.post(
            reverse("sales:transaction_list"), sale_payload((product, 0)), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "quantity" in response.data["items"][0]

    def test_invalid_payment_method(self, cashier_client, product):
        response = cashier_client.post(
            reverse("sales:transaction_list"),
            sale_payload((product, 1), payment_method="cheque"),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "payment_method" in response.data

    def test_list_and_filter(self, cashier_client, make_sale, manager, product):
        kept = make_sale([(product, 1)], customer_name="Alice")
        cancelled = make_sale([(product, 1)], customer_name="Bob")
        cancel_transaction(cancelled, manager)

        all_txns = cashier_client.get(reverse("sales:transaction_list"))
        completed = cashier_client.get(
            reverse("sales:transaction_list"), {"status": Transaction.COMPLETED}
        )
        search = cashier_client.get(reverse("sales:transaction_list"), {"search": "bob"})

        assert all_txns.data["pagination"]["total_items"] == 2
        assert [t["id"] for t in completed.data["results"]] == [kept.pk]
        assert [t["id"] for t in search.data["results"]] == [cancelled.pk]
        assert completed.data["results"][0]["items_count"] == 1

    def test_filter_by_date_range(self, cashier_client, make_sale, product):
        txn = make_sale([(product, 1)])
        today = timezone.localdate()
        url = reverse("sales:transaction_list")

        current = cashier_client.get(url, {"date_from": today, "date_to": today})
        future = cashier_client.get(url, {"date_from": today + timedelta(days=1)})

        assert [t["id"] for t in current.data["results"]] == [txn.pk]
        assert future.data["results"] == []

    @pytest.mark.parametrize(
        "params, field",
        [
            ({"date_from": "not-a-date"}, "date_from"),
            ({"date_to": "2024-13-45"}, "date_to"),
            ({"date_from": "2024-05-02", "date_to": "2024-05-01"}, "date_to"),
        ],
    )
    def test_invalid_date_range(self, manager_client, params, field):
        response = manager_client.get(reverse("sales:transaction_list"), params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_detail(self, cashier_client, make_sale, product):
        txn = make_sale([(product, 3)])

        response = cashier_client.get(reverse("sales:transaction_detail", args=[txn.pk]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["items"][0]["product_sku"] == "BEV-001"
        assert response.data["items"][0]["quantity"] == 3

    def test_cancel_endpoint(self, cashier_client, make_sale, cashier, product):
        txn = make_sale([(product, 3)])

        response = cashier_client.post(
            reverse("sales:transaction_cancel", args=[txn.pk]),
            {"reason": "Wrong item"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == Transaction.CANCELLED
        assert response.data["cancelled_by_name"] == "cashier1"
        assert response.data["cancellation_reason"] == "Wrong item"
        product.refresh_from_db()
        assert product.stock == 20

    def test_cancel_endpoint_twice(self, manager_client, make_sale, product):
        txn = make_sale([(product, 1)])
        url = reverse("sales:transaction_cancel", args=[txn.pk])

        first = manager_client.post(url, {}, format="json")
        second = manager_client.post(url, {}, format="json")

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert "already cancelled" in second.data["detail"]
        product.refresh_from_db()
        assert product.stock == 20

    def test_cancel_unknown_transaction(self, manager_client):
        response = manager_client.post(
            reverse("sales:transaction_cancel", args=[424242]), {}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestReceipt:
    """Test the receipt payload."""

    def test_receipt_payload(self, cashier_client, make_sale, product):
        txn = make_sale([(product, 2)], payment_amount=Decimal("25.00"))

        response = cashier_client.get(reverse("sales:transaction_receipt", args=[txn.pk]))

        assert response.status_code == status.HTTP_200_OK
        receipt = response.data
        assert receipt["store"]["name"] == "Test Store"
        assert receipt["store"]["phone"] == "555-0100"
        assert receipt["transaction_number"] == txn.transaction_number
        assert receipt["cashier"] == "Carl Reyes"
        assert receipt["items"] == [
            {
                "product_id": product.pk,
                "name": "Orange Juice 1L",
                "sku": "BEV-001",
                "quantity": 2,
                "price": "10.00",
                "subtotal": "20.00",
            }
        ]
        assert receipt["totals"] == {
            "subtotal": "20.00",
            "tax": "2.00",
            "tax_rate": "0.10",
            "total": "22.00",
        }
        assert receipt["payment"]["change"] == "3.00"
        assert receipt["payment"]["method_display"] == "Cash"
        assert receipt["farewell_message"] == "Thank you for your purchase!"

    def test_receipt_uses_farewell_message_in_language(self, cashier_client, make_sale, product):
        FarewellMessage.objects.create(message="¡Gracias por su compra!", language="es")
        txn = make_sale([(product, 1)])

        response = cashier_client.get(
            reverse("sales:transaction_receipt", args=[txn.pk]), {"language": "es"}
        )

        assert response.data["farewell_message"] == "¡Gracias por su compra!"

    def test_html_receipt(self, make_sale, product):
        txn = make_sale([(product, 1)])

        html = ReceiptGenerator(txn).generate_html_receipt()

        assert txn.transaction_number in html
        assert "Test Store" in html
        assert "11.00" in html


@pytest.mark.django_db
class TestSalesReports:
    """Test the sales report and daily dashboard."""

    def test_sales_report_counts_completed_only(self, manager_client, make_sale, manager, product):
        make_sale([(product, 1)])
        make_sale([(product, 2)])
        cancel_transaction(make_sale([(product, 3)]), manager)

        response = manager_client.get(reverse("sales:sales_report"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["transaction_count"] == 2
        assert response.data["total_sales"] == "33.00"
        assert response.data["sales_per_day"][0]["count"] == 2

    def test_sales_report_window(self, make_sale, product):
        old = make_sale([(product, 1)])
        Transaction.objects.filter(pk=old.pk).update(
            created_at=timezone.now() - timedelta(days=45)
        )
        make_sale([(product, 1)])

        report = SalesReportGenerator(days=30).get_sales_report()

        assert report["transaction_count"] == 1
        assert report["period_days"] == 30

    def test_daily_dashboard_trend(self, manager_client, make_sale, product):
        yesterday_sale = make_sale([(product, 1)])
        Transaction.objects.filter(pk=yesterday_sale.pk).update(
            created_at=timezone.now() - timedelta(days=1)
        )
        make_sale([(product, 2)])

        response = manager_client.get(reverse("sales:daily_sales_dashboard"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["today"] == {"total_sales": "22.00", "transaction_count": 1}
        assert response.data["yesterday"] == {"total_sales": "11.00", "transaction_count": 1}
        assert response.data["trend_percentage"] == 100.0
        assert response.data["trend"] == "up"

    def test_daily_dashboard_without_yesterday(self, make_sale, product):
        make_sale([(product, 1)])

        dashboard = SalesReportGenerator().get_daily_dashboard()

        assert dashboard["trend_percentage"] is None
        assert dashboard["trend"] == "up"

    def test_cashier_cannot_read_sales_report(self, cashier_client):
        response = cashier_client.get(reverse("sales:sales_report"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
