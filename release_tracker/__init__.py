"""Release tracker: product-change announcement discovery and lifecycle tracking."""

__version__ = "0.1.0"
