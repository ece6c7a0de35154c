# mimi/usage.py — daily free-tier allowance
import logging
from datetime import date
from enum import Enum
from typing import Callable, Dict, Optional

from . import config
from .storage import StorageError

logger = logging.getLogger(__name__)


class FeatureKind(str, Enum):
    VOCABULARY = "vocabulary"
    GAMES = "games"
    CHAT = "chat"


DEFAULT_LIMITS: Dict[FeatureKind, int] = {
    FeatureKind.VOCABULARY: config.FREE_VOCABULARY_LIMIT,
    FeatureKind.GAMES: config.FREE_GAMES_LIMIT,
    FeatureKind.CHAT: config.FREE_CHAT_LIMIT,
}


def _record_key(kind: FeatureKind) -> str:
    return f"usage:{kind.value}"


class UsageGate:
    """
    Per-calendar-day counter of gated actions, one `{date, count}` record per
    feature kind. A record whose date is not today counts as zero; storage is
    only rewritten on the next `consume`.

    `is_premium` is a callable so an upgrade mid-session takes effect on the
    very next check.
    """

    def __init__(
        self,
        store,
        is_premium: Callable[[], bool] = lambda: False,
        limits: Optional[Dict[FeatureKind, int]] = None,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.is_premium = is_premium
        self.limits = dict(DEFAULT_LIMITS if limits is None else limits)
        self._today = today

    def today_key(self) -> str:
        return self._today().isoformat()

    def used_today(self, kind: FeatureKind) -> int:
        """Today's count for `kind`. Unreadable storage counts as zero."""
        try:
            record = self.store.get(_record_key(kind))
        except StorageError as e:
            logger.warning("usage store unreadable, allowing %s: %s", kind.value, e)
            return 0
        if not isinstance(record, dict) or record.get("date") != self.today_key():
            return 0
        try:
            return max(0, int(record.get("count", 0)))
        except (TypeError, ValueError):
            logger.warning("corrupt usage record for %s: %r", kind.value, record)
            return 0

    def can_consume(self, kind: FeatureKind) -> bool:
        if self.is_premium():
            return True
        return self.used_today(kind) < self.limits[kind]

    def consume(self, kind: FeatureKind) -> None:
        if self.is_premium():
            return
        record = {"date": self.today_key(), "count": self.used_today(kind) + 1}
        try:
            self.store.set(_record_key(kind), record)
        except StorageError as e:
            logger.warning("could not persist %s usage: %s", kind.value, e)

    def remaining(self, kind: FeatureKind) -> Optional[int]:
        """Free actions left today, or None when unlimited (premium)."""
        if self.is_premium():
            return None
        return max(0, self.limits[kind] - self.used_today(kind))
