"""
Product catalog: listing, search, create, price update, delete.
"""
