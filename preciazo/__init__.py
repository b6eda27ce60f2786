"""Price observation pipeline for retailer product pages."""

__version__ = "0.1.0"
