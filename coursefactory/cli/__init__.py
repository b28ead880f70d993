"""Typer command-line interface (``coursefactory`` console script)."""

from .main import app

__all__ = ["app"]
