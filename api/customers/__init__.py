"""
Customers and their orders.
"""
