"""
Carrier Rates v1.0.0

Normalizes shipping-rate requests across carrier APIs and returns a unified
list of rate quotes.
"""
__version__ = "1.0.0"
