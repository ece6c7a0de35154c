# mimi/content.py — read-only word, sentence and quiz pools
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class VocabularyItem:
    id: str
    word: str
    translation: str
    emoji: str
    example_sentence: str


@dataclass(frozen=True)
class SentenceTemplate:
    id: str
    word_sequence: Tuple[str, ...]
    canonical_sentence: str


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: Tuple[str, ...]
    correct_answer: int  # index into options
    emoji: str


def _word(word: str, translation: str, emoji: str, example: str) -> VocabularyItem:
    return VocabularyItem(word.lower(), word, translation, emoji, example)


def _sentence(sid: str, text: str) -> SentenceTemplate:
    words = tuple(text.split())
    return SentenceTemplate(sid, words, " ".join(words))


# ---------------------------------------------------------------------
# VOCABULARY (English -> Turkish)
# ---------------------------------------------------------------------
VOCABULARY: List[VocabularyItem] = [
    _word("Apple", "Elma", "🍎", "I eat an apple every day."),
    _word("Dog", "Köpek", "🐕", "The dog is my best friend."),
    _word("Cat", "Kedi", "🐱", "The cat sleeps on the sofa."),
    _word("House", "Ev", "🏠", "I live in a big house."),
    _word("Book", "Kitap", "📚", "I read a book every night."),
    _word("Sun", "Güneş", "☀️", "The sun is bright today."),
    _word("Water", "Su", "💧", "I drink water every morning."),
    _word("Tree", "Ağaç", "🌳", "The tree has green leaves."),
    _word("Bird", "Kuş", "🐦", "The bird can fly high."),
    _word("Flower", "Çiçek", "🌸", "The flower smells nice."),
    _word("Happy", "Mutlu", "😊", "I am happy today."),
    _word("Big", "Büyük", "🐘", "The elephant is big."),
    _word("Small", "Küçük", "🐁", "The mouse is small."),
    _word("Red", "Kırmızı", "🔴", "The apple is red."),
    _word("Blue", "Mavi", "🔵", "The sky is blue."),
    _word("School", "Okul", "🏫", "I go to school every day."),
    _word("Friend", "Arkadaş", "👫", "She is my best friend."),
    _word("Family", "Aile", "👨‍👩‍👧", "I love my family."),
    _word("Food", "Yemek", "🍕", "Pizza is my favorite food."),
    _word("Play", "Oynamak", "⚽", "I play football with friends."),
]

# ---------------------------------------------------------------------
# SENTENCE TEMPLATES
# ---------------------------------------------------------------------
SENTENCES: List[SentenceTemplate] = [
    _sentence("s1", "I eat an apple"),
    _sentence("s2", "The dog is happy"),
    _sentence("s3", "The cat is small"),
    _sentence("s4", "I read a book"),
    _sentence("s5", "The sky is blue"),
    _sentence("s6", "I love my family"),
    _sentence("s7", "The bird can fly"),
    _sentence("s8", "I go to school"),
    _sentence("s9", "I drink water every morning"),
    _sentence("s10", "She is my best friend"),
]

# ---------------------------------------------------------------------
# DAILY CHALLENGE QUESTIONS
# ---------------------------------------------------------------------
CHALLENGE_QUESTIONS: List[QuizQuestion] = [
    QuizQuestion("What color is the sky?", ("Red", "Blue", "Green", "Yellow"), 1, "🌤️"),
    QuizQuestion('How do you say "Köpek" in English?', ("Cat", "Bird", "Dog", "Fish"), 2, "🐕"),
    QuizQuestion("What do we drink?", ("Book", "Water", "Chair", "Pen"), 1, "💧"),
    QuizQuestion('What is the opposite of "big"?', ("Tall", "Small", "Fast", "Slow"), 1, "📏"),
    QuizQuestion("How many legs does a cat have?", ("Two", "Three", "Four", "Five"), 2, "🐱"),
    QuizQuestion("What color is grass?", ("Blue", "Red", "Green", "Yellow"), 2, "🌿"),
    QuizQuestion("Where do fish live?", ("In trees", "In water", "In houses", "In the sky"), 1, "🐟"),
    QuizQuestion("What do we use to write?", ("Fork", "Pen", "Spoon", "Cup"), 1, "✏️"),
    QuizQuestion('How do you say "Merhaba" in English?', ("Goodbye", "Hello", "Thank you", "Please"), 1, "👋"),
    QuizQuestion('What animal says "meow"?', ("Dog", "Bird", "Cat", "Cow"), 2, "🐱"),
]


@dataclass(frozen=True)
class ContentPools:
    """Everything the drills and mini-games read from. Never mutated."""

    vocabulary: Tuple[VocabularyItem, ...] = field(default_factory=lambda: tuple(VOCABULARY))
    sentences: Tuple[SentenceTemplate, ...] = field(default_factory=lambda: tuple(SENTENCES))
    questions: Tuple[QuizQuestion, ...] = field(default_factory=lambda: tuple(CHALLENGE_QUESTIONS))

    def word_by_id(self, item_id: str) -> VocabularyItem:
        for item in self.vocabulary:
            if item.id == item_id:
                return item
        raise KeyError(item_id)


DEFAULT_POOLS = ContentPools()
