"""Per-screen cache of fetched tables with explicit invalidation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from core.errors import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class QueryContext:
    """Holds the query results a screen has fetched.

    Results are fetched lazily on first ``get`` and kept until
    ``invalidate`` drops and refetches them. A failed fetch is kept as an
    error result; it is not retried until the key is invalidated.
    """

    def __init__(self) -> None:
        self._fetchers: Dict[str, Callable[[], Any]] = {}
        self._results: Dict[str, QueryResult] = {}

    def register(self, key: str, fetcher: Callable[[], Any]) -> None:
        if key in self._fetchers:
            return
        self._fetchers[key] = fetcher

    def __contains__(self, key: str) -> bool:
        return key in self._fetchers

    def _fetch(self, key: str) -> QueryResult:
        try:
            result = QueryResult(data=self._fetchers[key]())
        except GatewayError as exc:
            result = QueryResult(error=str(exc))
        self._results[key] = result
        return result

    def get(self, key: str) -> QueryResult:
        if key not in self._fetchers:
            raise KeyError(f"No query registered for {key!r}")
        if key in self._results:
            return self._results[key]
        return self._fetch(key)

    def invalidate(self, *keys: str) -> None:
        """Drop cached results and refetch the registered ones."""
        for key in keys:
            self._results.pop(key, None)
            if key in self._fetchers:
                logger.debug("Refetching %s", key)
                self._fetch(key)

    def clear(self) -> None:
        self._results.clear()


def screen_context(session_state, screen: str) -> QueryContext:
    """Return the QueryContext stored for ``screen`` in Streamlit session state."""
    key = f"queries:{screen}"
    if key not in session_state:
        session_state[key] = QueryContext()
    return session_state[key]
