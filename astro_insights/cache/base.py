import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    Process-lifetime in-memory cache.

    No TTL, no size bound, no persistence. Entries live until
    clear() is called (the "new reading" action) or the process exits.
    One instance is injected per service so tests stay isolated.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}

    # ─────────────────────────────────────────────
    # Core operations
    # ─────────────────────────────────────────────

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.
        Returns None if key does not exist.
        """
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Response cache cleared ({count} entries)")

    # ─────────────────────────────────────────────
    # Container protocol
    # ─────────────────────────────────────────────

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
