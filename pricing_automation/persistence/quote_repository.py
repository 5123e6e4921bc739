"""
Quote Repository — optional persistence collaborator for price quotes.
Append-only; uses an in-memory list. A database-backed store implements the
same three methods.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pricing_automation.models.schemas import PriceQuote

logger = logging.getLogger(__name__)


class QuoteRepository:
    """Save and look up PriceQuote snapshots by sequential id."""

    def __init__(self):
        self._memory_store: list[PriceQuote] = []
        self._lock = threading.Lock()

    def save_quote(self, quote: PriceQuote) -> int:
        """Save a quote and return its id (1-based, append order)."""
        with self._lock:
            self._memory_store.append(quote)
            quote_id = len(self._memory_store)
        logger.info(f"Saved quote #{quote_id} ({quote.rule_applied}: {quote.final_price:.2f})")
        return quote_id

    def get_quote(self, quote_id: int) -> Optional[PriceQuote]:
        """Return the quote with *quote_id*, or None if not found."""
        with self._lock:
            if 1 <= quote_id <= len(self._memory_store):
                return self._memory_store[quote_id - 1]
        return None

    def list_quotes(self) -> list[PriceQuote]:
        with self._lock:
            return list(self._memory_store)

    def count(self) -> int:
        with self._lock:
            return len(self._memory_store)
