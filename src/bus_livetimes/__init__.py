"""Live departure times retrieval and arrival alert evaluation."""

__version__ = "0.1.0"
