"""Cartola vs Libro Mayor bank reconciliation for BCI and Estado."""

__version__ = "0.1.0"
