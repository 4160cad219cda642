"""
Holder Pricing Package

Price calculation and order-line pricing for configurable glass and bottle holders.
Resolves item prices using Variant → Active Pricing Table → Breakdown pipeline.
"""

__version__ = "1.0.0"
