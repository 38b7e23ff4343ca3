"""
Signals sent by the inventory app.
"""

from django.dispatch import Signal

# Sent after a stock change leaves a product at or below its low stock threshold.
# Arguments: product, previous_stock, current_stock
low_stock_detected = Signal()
