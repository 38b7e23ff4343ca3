"""
Sales app: point of sale transactions, receipts and sales reporting.
"""
