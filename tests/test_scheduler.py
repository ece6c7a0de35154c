import asyncio

from mimi import scheduler as scheduler_module
from mimi.games import MemoryGame
from mimi.scheduler import AsyncioScheduler, ManualScheduler, TimerGroup, WallClockScheduler


def test_call_later_fires_only_when_due():
    clock = ManualScheduler()
    fired = []
    clock.call_later(1.5, lambda: fired.append(clock.now()))

    clock.advance(1.4)
    assert fired == []
    clock.advance(0.1)
    assert fired == [1.5]


def test_cancelled_timer_never_fires():
    clock = ManualScheduler()
    fired = []
    handle = clock.call_later(1.0, lambda: fired.append("x"))
    handle.cancel()
    handle.cancel()

    clock.advance(5)
    assert fired == []
    assert not handle.active
    assert clock.pending == 0


def test_timers_fire_in_due_order():
    clock = ManualScheduler()
    fired = []
    clock.call_later(2.0, lambda: fired.append("b"))
    clock.call_later(1.0, lambda: fired.append("a"))
    clock.call_later(2.0, lambda: fired.append("c"))

    clock.advance(3)
    assert fired == ["a", "b", "c"]


def test_call_every_repeats_until_cancelled():
    clock = ManualScheduler()
    ticks = []
    handle = clock.call_every(0.25, lambda: ticks.append(clock.now()))

    clock.advance(1.0)
    assert len(ticks) == 4
    assert clock.pending == 1

    handle.cancel()
    clock.advance(1.0)
    assert len(ticks) == 4
    assert clock.pending == 0


def test_repeating_callback_can_cancel_itself():
    clock = ManualScheduler()
    ticks = []

    def tick():
        ticks.append(1)
        if len(ticks) == 3:
            handle.cancel()

    handle = clock.call_every(1.0, tick)
    clock.advance(10)
    assert len(ticks) == 3


def test_timer_group_cancels_everything_it_owns():
    clock = ManualScheduler()
    group = TimerGroup(clock)
    fired = []
    group.later(1.0, lambda: fired.append("later"))
    group.every(0.5, lambda: fired.append("every"))
    assert len(group) == 2

    group.cancel_all()
    clock.advance(10)
    assert fired == []
    assert len(group) == 0
    assert clock.pending == 0


def test_asyncio_scheduler_runs_on_the_loop():
    fired = []

    async def scenario():
        sched = AsyncioScheduler()
        sched.call_later(0.01, lambda: fired.append("kept"))
        dropped = sched.call_later(0.01, lambda: fired.append("dropped"))
        dropped.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert fired == ["kept"]


def test_wall_clock_scheduler_catches_up(monkeypatch):
    now = [100.0]
    monkeypatch.setattr(scheduler_module.time, "monotonic", lambda: now[0])
    clock = WallClockScheduler()
    fired = []
    clock.call_later(2.0, lambda: fired.append("done"))

    now[0] = 101.0
    clock.catch_up()
    assert fired == []

    now[0] = 102.5
    clock.catch_up()
    assert fired == ["done"]
    assert clock.now() == 102.5


def test_timer_group_forgets_timers_once_they_fire():
    clock = ManualScheduler()
    group = TimerGroup(clock)
    fired = []
    for _ in range(20):
        group.later(1.0, lambda: fired.append(1))
        clock.advance(1.0)

    assert len(fired) == 20
    assert group._timers == set()


def test_long_round_does_not_pile_up_feedback_timers(make_pools, rng, clock):
    game = MemoryGame(
        pools=make_pools("apple", "dog", "cat", "house", "book", "sun"), rng=rng, scheduler=clock
    )
    game.start()
    first = game.cards[0]
    miss = next(c for c in game.cards if c.pair_id != first.pair_id)
    for _ in range(10):
        game.flip(first.index)
        game.flip(miss.index)
        clock.advance(1.2)

    assert game.moves == 10
    assert game.timers._timers == set()
