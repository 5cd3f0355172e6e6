"""storytree - page-state reconciliation for branching stories."""

__version__ = "0.1.0"
