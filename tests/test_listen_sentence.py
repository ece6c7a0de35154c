import random

import pytest

from mimi.content import SENTENCES
from mimi.games import ListenAndPick, Phase, SentenceBuilder


@pytest.fixture
def listen(pools, rng, clock, speech):
    g = ListenAndPick(pools=pools, rng=rng, scheduler=clock, speech=speech)
    g.start()
    return g


@pytest.fixture
def builder(pools, rng, clock, speech):
    g = SentenceBuilder(pools=pools, rng=rng, scheduler=clock, speech=speech)
    g.start()
    return g


def build_correctly(game):
    for word in game.template.word_sequence:
        tile = next(t for t in game.tiles if t.word == word and t.id not in game.built)
        assert game.tap(tile.id)


# ── listen and pick ──────────────────────────────────────────────────────

def test_listen_says_the_target_and_warms_the_next_words(listen, speech):
    assert speech.said == [listen.target.word]
    upcoming = [t.word for t in listen.targets[1:]]
    assert speech.warmed == upcoming
    assert listen.target in listen.options


def test_play_again_repeats_the_word(listen, speech):
    assert listen.play_again()
    assert speech.said == [listen.target.word] * 2


def test_listen_pick_scores_and_moves_on(listen, clock, speech):
    first = listen.target
    assert listen.pick(first.id).delta == 10
    assert listen.pick(first.id) is None
    assert not listen.play_again()

    clock.advance(1.5)
    assert listen.index == 1
    assert speech.said[-1] == listen.target.word


def test_wrong_pick_reveals_the_word_and_still_moves_on(listen, clock):
    target = listen.target
    wrong = next(o for o in listen.options if o.id != target.id)
    fb = listen.pick(wrong.id)
    assert not fb.correct
    assert fb.answer == target.word

    clock.advance(1.5)
    assert listen.index == 1


def test_listen_round_of_five(listen, clock):
    for _ in range(5):
        listen.pick(listen.target.id)
        clock.advance(1.5)
    assert listen.complete
    assert listen.score == 50


def test_listen_survives_broken_audio(pools, rng, clock, broken_speech):
    game = ListenAndPick(pools=pools, rng=rng, scheduler=clock, speech=broken_speech)
    game.start()
    assert game.accepting_input
    assert game.play_again()


# ── sentence builder ─────────────────────────────────────────────────────

def test_tiles_never_start_solved(pools, clock, speech):
    for seed in range(20):
        game = SentenceBuilder(pools=pools, rng=random.Random(seed), scheduler=clock, speech=speech)
        game.start()
        assert [t.word for t in game.tiles] != list(game.template.word_sequence)
        game.exit()


def test_correct_sentence_scores_and_is_read_aloud(builder, clock, speech):
    assert not builder.can_submit
    build_correctly(builder)
    assert builder.sentence == builder.template.canonical_sentence

    fb = builder.submit()
    assert fb.correct and fb.delta == 15
    assert speech.said == [builder.template.canonical_sentence]

    clock.advance(2.0)
    assert builder.index == 1
    assert builder.built == []


def test_wrong_order_is_all_or_nothing(builder, clock):
    for word in reversed(builder.template.word_sequence):
        tile = next(t for t in builder.tiles if t.word == word and t.id not in builder.built)
        builder.tap(tile.id)

    fb = builder.submit()
    assert not fb.correct
    assert fb.delta == 0
    assert fb.answer == builder.template.canonical_sentence

    clock.advance(2.0)
    assert builder.index == 1


def test_tap_and_untap(builder):
    first = builder.tiles[0].id
    second = builder.tiles[1].id
    assert builder.tap(first)
    assert not builder.tap(first)
    assert builder.tap(second)

    assert builder.untap()
    assert builder.built == [first]
    assert not builder.untap(second)
    assert builder.untap(first)
    assert not builder.untap()


def test_sentence_round_of_five(builder, clock):
    for _ in range(5):
        build_correctly(builder)
        builder.submit()
        clock.advance(2.0)
    assert builder.complete
    assert builder.score == 75
    assert builder.phase is Phase.COMPLETE


def test_sentence_pool_words_are_unique_per_sentence():
    for template in SENTENCES:
        words = template.word_sequence
        assert len(set(words)) == len(words)
        assert " ".join(words) == template.canonical_sentence
