"""Chat message elements, binary packet helpers and small utilities for a QQ NT protocol client."""

__version__ = "0.1.0"