"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    # Products
    path("api/products/", views.ProductListCreateView.as_view(), name="product_list"),
    path("api/products/<int:pk>/", views.ProductDetailView.as_view(), name="product_detail"),
    path("api/products/<int:pk>/stock/", views.product_stock, name="product_stock"),
    path(
        "api/products/<int:pk>/adjust-stock/", views.stock_adjustment, name="stock_adjustment"
    ),
    path("api/products/<int:pk>/restock/", views.restock, name="restock"),
    # Categories
    path("api/categories/", views.CategoryListCreateView.as_view(), name="category_list"),
    path(
        "api/categories/<int:pk>/", views.CategoryDetailView.as_view(), name="category_detail"
    ),
    # Inventory log
    path(
        "api/inventory/logs/", views.InventoryMovementListView.as_view(), name="movement_list"
    ),
    # Reports
    path("api/reports/inventory/", views.inventory_report, name="inventory_report"),
    path("api/reports/low-stock/", views.low_stock_report, name="low_stock_report"),
]
