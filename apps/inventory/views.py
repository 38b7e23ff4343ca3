"""
Views for inventory management.

- Product list with search and filters
- Product create/edit/soft delete
- Stock adjustment and restock through the movement log
- Inventory logs and reports
- Categories
"""

import logging

from django.db.models import F, Q
from django.shortcuts import get_object_or_404

from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import (
    HasPosPermission,
    IsCashierOrAbove,
    IsManagerOrAbove,
    IsManagerOrReadOnly,
)

from .models import Category, InventoryMovement, Product
from .reports import InventoryReportGenerator
from .serializers import (
    CategorySerializer,
    InventoryMovementSerializer,
    ProductListSerializer,
    ProductSerializer,
    RestockSerializer,
    StockAdjustmentSerializer,
)
from .services import InsufficientStockError, adjust_product_stock, restock_product

logger = logging.getLogger(__name__)

TRUTHY = ["true", "1", "yes"]


class ProductListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing products (all roles) and creating them (managers).

    Supports:
    - Search by name, SKU or barcode
    - Filter by category, is_active, low_stock
    - Ordering by name, sku, price, stock, created_at
    - Page size through ?per_page=
    """

    permission_classes = [IsManagerOrReadOnly]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["name", "sku", "price", "stock", "created_at"]
    ordering = ["name"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return ProductSerializer
        return ProductListSerializer

    def get_queryset(self):
        queryset = Product.objects.select_related("category")

        search = self.request.query_params.get("search", None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(sku__icontains=search) | Q(barcode__icontains=search)
            )

        category_id = self.request.query_params.get("category", None)
        if category_id:
            queryset = queryset.filter(category_id=category_id)

        is_active = self.request.query_params.get("is_active", None)
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() in TRUTHY)
        elif self.request.user.is_cashier():
            # Cashiers only see what they can sell
            queryset = queryset.filter(is_active=True)

        low_stock = self.request.query_params.get("low_stock", None)
        if low_stock and low_stock.lower() in TRUTHY:
            queryset = queryset.filter(stock__lte=F("low_stock_threshold"))

        return queryset

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(f"Product {product.sku} created by {self.request.user.username}")


class ProductDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deactivating a product.

    Deleting a product that still has stock is refused. Otherwise the product
    is deactivated so sales history keeps pointing at it.
    """

    queryset = Product.objects.select_related("category")
    serializer_class = ProductSerializer
    permission_classes = [IsManagerOrReadOnly]

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        if product.stock > 0:
            return Response(
                {"detail": "Cannot delete product with existing stock."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        product.is_active = False
        product.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Product {product.sku} deactivated by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["POST"])
@permission_classes([IsManagerOrAbove])
def stock_adjustment(request, pk):
    """
    API endpoint for manual stock corrections.

    Request body:
    {
        "quantity": <signed non-zero integer>,
        "notes": "<required reason>"
    }
    """
    product = get_object_or_404(Product, pk=pk)

    serializer = StockAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        movement = adjust_product_stock(
            product,
            serializer.validated_data["quantity"],
            user=request.user,
            notes=serializer.validated_data["notes"],
        )
    except InsufficientStockError as e:
        logger.warning(f"Rejected stock adjustment for {product.sku}: {e}")
        return Response(
            {
                "detail": "Insufficient stock",
                "available": e.available,
                "requested": e.requested,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    return Response(
        {
            "id": product.id,
            "stock": product.stock,
            "stock_status": product.stock_status,
            "movement": InventoryMovementSerializer(movement).data,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([IsManagerOrAbove])
def restock(request, pk):
    """
    API endpoint for receiving stock.

    Request body:
    {
        "quantity": <integer >= 1>,
        "notes": "<optional>"
    }
    """
    product = get_object_or_404(Product, pk=pk)

    serializer = RestockSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    movement = restock_product(
        product,
        serializer.validated_data["quantity"],
        user=request.user,
        notes=serializer.validated_data.get("notes", ""),
    )

    return Response(
        {
            "detail": "Product restocked successfully.",
            "product": ProductSerializer(product).data,
            "movement": InventoryMovementSerializer(movement).data,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([IsCashierOrAbove])
def product_stock(request, pk):
    """Current stock, status and the latest movements for one product."""
    product = get_object_or_404(Product, pk=pk)
    recent = product.movements.select_related("user")[:10]

    return Response(
        {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "stock": product.stock,
            "low_stock_threshold": product.low_stock_threshold,
            "reorder_point": product.reorder_point,
            "stock_status": product.stock_status,
            "needs_reorder": product.needs_reorder(),
            "recent_movements": InventoryMovementSerializer(recent, many=True).data,
        }
    )


class InventoryMovementListView(generics.ListAPIView):
    """
    API endpoint for the inventory log, newest first.

    Query parameters:
    - product: product ID
    - movement_type: in | out | adjustment
    - reference_type: sale | cancellation | restock | adjustment | initial
    """

    serializer_class = InventoryMovementSerializer
    permission_classes = [HasPosPermission]
    required_permission = "inventory.logs"

    def get_queryset(self):
        queryset = InventoryMovement.objects.select_related("product", "user")

        product_id = self.request.query_params.get("product")
        if product_id:
            queryset = queryset.filter(product_id=product_id)

        movement_type = self.request.query_params.get("movement_type")
        if movement_type:
            queryset = queryset.filter(movement_type=movement_type)

        reference_type = self.request.query_params.get("reference_type")
        if reference_type:
            queryset = queryset.filter(reference_type=reference_type)

        return queryset


@api_view(["GET"])
@permission_classes([IsManagerOrAbove])
def inventory_report(request):
    """
    Inventory summary: product counts, stock value and 30 days of movement.
    """
    generator = InventoryReportGenerator()
    return Response(generator.get_inventory_summary_report(), status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([IsManagerOrAbove])
def low_stock_report(request):
    """
    Products at or below their low stock threshold.
    """
    generator = InventoryReportGenerator()
    return Response(generator.get_low_stock_report(), status=status.HTTP_200_OK)


# Category Views


class CategoryListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing (all roles) and creating (managers) categories.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsManagerOrReadOnly]
    pagination_class = None


class CategoryDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deleting a category.

    Products in a deleted category are left uncategorised.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsManagerOrReadOnly]
