"""Stage-aware search indexing and result materialization."""

__version__ = "1.0.0"
