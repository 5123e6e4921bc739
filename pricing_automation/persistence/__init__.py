"""Persistence — QuoteRepository."""

from pricing_automation.persistence.quote_repository import QuoteRepository

__all__ = ["QuoteRepository"]
