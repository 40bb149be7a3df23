"""printzone — product image resolution and print-zone overlay geometry."""

__version__ = "0.1.0"
