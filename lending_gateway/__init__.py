"""Read-side aggregation gateway for DeFi lending providers."""

__version__ = "0.1.0"
