"""Phase scheduler - timeline allocation for multi-phase academic projects."""

__version__ = "0.1.0"
