import json
import logging
from datetime import date

from mimi.storage import JsonFileStore, MemoryStore, StorageError
from mimi.usage import FeatureKind, UsageGate


def fixed_day(y, m, d):
    return lambda: date(y, m, d)


class FlakyStore:
    def __init__(self, fail_reads=True, fail_writes=True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = []

    def get(self, key):
        if self.fail_reads:
            raise StorageError("disk on fire")
        return None

    def set(self, key, value):
        if self.fail_writes:
            raise StorageError("read-only")
        self.writes.append((key, value))


def test_free_account_stops_after_limit():
    store = MemoryStore()
    gate = UsageGate(store, limits={FeatureKind.VOCABULARY: 3}, today=fixed_day(2024, 5, 1))

    for _ in range(3):
        assert gate.can_consume(FeatureKind.VOCABULARY)
        gate.consume(FeatureKind.VOCABULARY)

    assert not gate.can_consume(FeatureKind.VOCABULARY)
    assert gate.remaining(FeatureKind.VOCABULARY) == 0
    assert store.get("usage:vocabulary") == {"date": "2024-05-01", "count": 3}


def test_allowance_returns_when_the_day_changes():
    store = MemoryStore()
    today = [date(2024, 5, 1)]
    gate = UsageGate(store, limits={FeatureKind.GAMES: 1}, today=lambda: today[0])

    gate.consume(FeatureKind.GAMES)
    assert not gate.can_consume(FeatureKind.GAMES)

    today[0] = date(2024, 5, 2)
    assert gate.can_consume(FeatureKind.GAMES)


def test_day_rollover_is_lazy():
    store = MemoryStore({"usage:vocabulary": {"date": "2024-01-01", "count": 3}})
    gate = UsageGate(store, limits={FeatureKind.VOCABULARY: 3}, today=fixed_day(2024, 1, 2))

    assert gate.used_today(FeatureKind.VOCABULARY) == 0
    assert gate.can_consume(FeatureKind.VOCABULARY)
    # checking alone never rewrites the stored record
    assert store.get("usage:vocabulary") == {"date": "2024-01-01", "count": 3}

    gate.consume(FeatureKind.VOCABULARY)
    assert store.get("usage:vocabulary") == {"date": "2024-01-02", "count": 1}


def test_premium_is_always_allowed_and_never_counted():
    store = MemoryStore({"usage:games": {"date": "2024-05-01", "count": 999}})
    gate = UsageGate(
        store,
        is_premium=lambda: True,
        limits={FeatureKind.GAMES: 2},
        today=fixed_day(2024, 5, 1),
    )

    for _ in range(10):
        assert gate.can_consume(FeatureKind.GAMES)
        gate.consume(FeatureKind.GAMES)

    assert store.get("usage:games") == {"date": "2024-05-01", "count": 999}
    assert gate.remaining(FeatureKind.GAMES) is None


def test_upgrade_mid_session_applies_on_next_check():
    premium = [False]
    gate = UsageGate(
        MemoryStore(),
        is_premium=lambda: premium[0],
        limits={FeatureKind.VOCABULARY: 0},
        today=fixed_day(2024, 5, 1),
    )
    assert not gate.can_consume(FeatureKind.VOCABULARY)
    premium[0] = True
    assert gate.can_consume(FeatureKind.VOCABULARY)


def test_feature_kinds_are_counted_separately():
    gate = UsageGate(
        MemoryStore(),
        limits={FeatureKind.VOCABULARY: 1, FeatureKind.GAMES: 5},
        today=fixed_day(2024, 5, 1),
    )
    gate.consume(FeatureKind.VOCABULARY)
    assert not gate.can_consume(FeatureKind.VOCABULARY)
    assert gate.remaining(FeatureKind.GAMES) == 5


def test_unreadable_store_fails_open(caplog):
    gate = UsageGate(FlakyStore(), limits={FeatureKind.GAMES: 1}, today=fixed_day(2024, 5, 1))

    with caplog.at_level(logging.WARNING, logger="mimi.usage"):
        assert gate.can_consume(FeatureKind.GAMES)
        gate.consume(FeatureKind.GAMES)  # write failure is swallowed too

    assert any("usage store unreadable" in r.message for r in caplog.records)
    assert any("could not persist" in r.message for r in caplog.records)


def test_corrupt_record_counts_as_zero():
    store = MemoryStore({"usage:games": {"date": "2024-05-01", "count": "lots"}})
    gate = UsageGate(store, limits={FeatureKind.GAMES: 1}, today=fixed_day(2024, 5, 1))
    assert gate.can_consume(FeatureKind.GAMES)


def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "usage.json"
    gate = UsageGate(JsonFileStore(path), limits={FeatureKind.CHAT: 2}, today=fixed_day(2024, 5, 1))
    gate.consume(FeatureKind.CHAT)
    gate.consume(FeatureKind.CHAT)

    reopened = UsageGate(JsonFileStore(path), limits={FeatureKind.CHAT: 2}, today=fixed_day(2024, 5, 1))
    assert not reopened.can_consume(FeatureKind.CHAT)
    assert json.loads(path.read_text(encoding="utf-8"))["usage:chat"]["count"] == 2


def test_json_file_store_garbage_fails_open(tmp_path):
    path = tmp_path / "usage.json"
    path.write_text("{not json", encoding="utf-8")
    gate = UsageGate(JsonFileStore(path), limits={FeatureKind.GAMES: 1}, today=fixed_day(2024, 5, 1))
    assert gate.can_consume(FeatureKind.GAMES)
