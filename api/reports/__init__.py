"""
Aggregate reporting over products, categories and reviews.
"""
