"""Levantapedidos: order suggestions from DominioDZ sales history."""

__version__ = "1.0.0"
