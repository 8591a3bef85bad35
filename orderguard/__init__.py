"""
OrderGuard — record trigger runtime for bicycle order stock validation.

Before a bicycle order is inserted or updated, the order_stock_validation
trigger checks the ordered quantity against catalog stock and rejects the
change with a localized message when the model is unknown, out of stock, or
short of the requested quantity.
"""

__version__ = "1.0.0"
__all__ = ["engine", "records", "rules", "services", "db", "translation_sets"]
