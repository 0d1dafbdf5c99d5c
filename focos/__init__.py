"""
FOCOS package
=============

This package contains the fire occurrence ingestion and analytics engine.

- The CLI entry point is in `focos/cli.py`.
- Merging yearly CSV files is in `focos/merger.py`.
- Loading the merged dataset into a store is in `focos/loader.py`.
- Aggregations (counts, growth, rankings) are in `focos/aggregate.py`.
- Trend forecasting (linear regression) is in `focos/trend.py`.
"""

__version__ = '0.3.0'
