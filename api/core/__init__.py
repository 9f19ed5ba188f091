"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses
(storage handle, query building, settings, logging). Keep feature-specific SQL
and business rules in the corresponding feature package (e.g. `products/`).
"""
