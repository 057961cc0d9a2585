# backend/finengine/__init__.py
"""
Financial aggregation and valuation engine.

Turns holdings, exchange rates, monthly snapshots and yearly records into
multi-currency portfolio values, cost-basis updates and a year-over-year
performance series.
"""

__version__ = "0.1.0"
