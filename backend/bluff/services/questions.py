"""Question deck provider.

Ships a small built-in deck; ``QUESTIONS_PATH`` may point at a JSON file
holding ``[{"prompt": "...", "answer": "..."}]`` instead.
"""
import json
import logging
import random
from typing import Iterable, List, Optional

from bluff.models import Question

logger = logging.getLogger(__name__)

BLANK = '___'

DEFAULT_QUESTIONS = [
    Question('The national animal of Scotland is the ___.', 'Unicorn'),
    Question('In 1999, a man in Texas legally changed his name to ___.', 'Dot Com'),
    Question('The first item ever sold on eBay was a broken ___.', 'Laser pointer'),
    Question('A group of flamingos is called a ___.', 'Flamboyance'),
    Question('Before settling on its name, Google was going to be called ___.', 'Backrub'),
    Question('The longest recorded flight of a chicken lasted ___ seconds.', '13'),
    Question('Bananas are berries, but ___ are not.', 'Strawberries'),
    Question('The dot over a lowercase i or j is called a ___.', 'Tittle'),
    Question('A baby puffin is called a ___.', 'Puffling'),
    Question('The inventor of the Pringles can was buried in ___.', 'A Pringles can'),
    Question('Octopuses have ___ hearts.', 'Three'),
    Question('The fear of long words is called ___.', 'Hippopotomonstrosesquippedaliophobia'),
    Question('The world\'s first webcam watched a ___.', 'Coffee pot'),
    Question('In Switzerland it is illegal to own just one ___.', 'Guinea pig'),
    Question('The original name of the Bank of America was the Bank of ___.', 'Italy'),
    Question('The ___ is the only letter that does not appear in any U.S. state name.', 'Q'),
]


def _parse_entry(entry) -> Question:
    if not isinstance(entry, dict):
        raise ValueError(f'question entry must be an object, got {entry!r}')
    prompt = entry.get('prompt', entry.get('text'))
    answer = entry.get('answer')
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValueError(f'question entry has no prompt: {entry!r}')
    if not isinstance(answer, str) or not answer.strip():
        raise ValueError(f'question entry has no answer: {entry!r}')
    if BLANK not in prompt:
        logger.warning(f"[questions] prompt has no blank marker: {prompt!r}")
    return Question(prompt.strip(), answer.strip())


class QuestionBank:
    def __init__(self, questions: Optional[Iterable[Question]] = None):
        self.questions: List[Question] = list(DEFAULT_QUESTIONS if questions is None else questions)

    def __len__(self):
        return len(self.questions)

    @classmethod
    def from_file(cls, path: str) -> 'QuestionBank':
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f'{path}: expected a list of questions')
        bank = cls(_parse_entry(entry) for entry in data)
        logger.info(f"[questions] loaded {len(bank)} questions from {path}")
        return bank

    @classmethod
    def from_config(cls, config) -> 'QuestionBank':
        path = config.get('QUESTIONS_PATH')
        return cls.from_file(path) if path else cls()

    def deck(self, count: int, shuffle: bool = True, rng: Optional[random.Random] = None) -> List[Question]:
        """Questions for one game: shuffled once if asked, truncated to ``count``."""
        questions = list(self.questions)
        if shuffle:
            (rng or random).shuffle(questions)
        return questions[:max(0, count)]
