import pytest

from mimi.drills import DailyChallenge, VocabularyDrill
from mimi.scoring import challenge_verdict, feedback, spelling_points


@pytest.fixture
def drill(pools, rng, clock, speech):
    d = VocabularyDrill(pools=pools, rng=rng, scheduler=clock, speech=speech)
    d.start()
    return d


@pytest.fixture
def challenge(pools, rng, clock, speech):
    c = DailyChallenge(pools=pools, rng=rng, scheduler=clock, speech=speech)
    c.start()
    return c


def correct_option(drill):
    return drill.options.index(drill.word.translation)


def test_drill_starts_on_the_learn_card(drill, speech):
    assert drill.step == "learn"
    assert drill.answer(0) is None
    assert drill.speak_word()
    assert drill.speak_example()
    assert speech.said == [drill.word.word, drill.word.example_sentence]
    assert drill.word.example_sentence in speech.warmed


def test_quiz_has_four_translations(drill):
    assert drill.start_quiz()
    assert not drill.start_quiz()
    assert len(drill.options) == 4
    assert len(set(drill.options)) == 4
    assert drill.word.translation in drill.options


def test_quiz_answer_scores_and_returns_to_learn(drill, clock):
    first = drill.word
    drill.start_quiz()
    fb = drill.answer(correct_option(drill))
    assert fb.correct and fb.delta == 10

    clock.advance(1.5)
    assert drill.word is not first
    assert drill.step == "learn"


def test_wrong_quiz_answer_shows_translation(drill):
    drill.start_quiz()
    wrong = next(i for i, o in enumerate(drill.options) if o != drill.word.translation)
    fb = drill.answer(wrong)
    assert not fb.correct
    assert fb.answer == drill.word.translation
    assert drill.score == 0


def test_out_of_range_answer_is_ignored(drill):
    drill.start_quiz()
    assert drill.answer(4) is None
    assert drill.answer(-1) is None
    assert drill.accepting_input


def test_drill_of_five_words(drill, clock):
    for _ in range(5):
        drill.start_quiz()
        drill.answer(correct_option(drill))
        clock.advance(1.5)
    assert drill.complete
    assert drill.score == 50


def test_challenge_perfect_run(challenge, clock):
    assert len(challenge.questions) == 3
    assert challenge.verdict is None
    for _ in range(3):
        fb = challenge.answer(challenge.question.correct_answer)
        assert fb.delta == 20
        clock.advance(1.5)

    assert challenge.complete
    assert challenge.score == 60
    assert challenge.verdict.startswith("Amazing")


def test_challenge_all_wrong(challenge, clock):
    for _ in range(3):
        q = challenge.question
        fb = challenge.answer((q.correct_answer + 1) % len(q.options))
        assert fb.answer == q.options[q.correct_answer]
        clock.advance(1.5)
    assert challenge.score == 0
    assert challenge.verdict.startswith("Keep practising")


@pytest.mark.parametrize(
    "score, opening",
    [(60, "Amazing"), (40, "Very good"), (20, "Keep practising")],
)
def test_challenge_verdict_thresholds(score, opening):
    assert challenge_verdict(score).startswith(opening)


def test_spelling_points_never_go_below_minimum():
    assert [spelling_points(n) for n in range(5)] == [10, 6, 3, 3, 3]


def test_wrong_feedback_never_moves_the_score(rng):
    fb = feedback(False, 15, rng, answer="Kedi")
    assert fb.delta == 0
    assert fb.answer == "Kedi"
    assert feedback(True, 15, rng, answer="Kedi").answer is None
