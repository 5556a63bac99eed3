"""Photo gallery web application backed by blob storage."""

__version__ = "0.1.0"
