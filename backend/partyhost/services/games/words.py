import random
from typing import Iterable, List, Optional


DEFAULT_WORDS = [
    'apple', 'banana', 'cherry', 'dog', 'cat', 'elephant', 'guitar', 'house', 'island',
    'jungle', 'kite', 'lemon', 'mountain', 'notebook', 'ocean', 'penguin', 'queen',
    'robot', 'sun', 'tree', 'umbrella', 'violin', 'whale', 'xylophone', 'yacht', 'zebra',
    'airplane', 'book', 'car', 'dragon', 'egg', 'flower', 'ghost', 'hammer', 'ice',
    'jacket', 'key', 'lamp', 'moon', 'nose', 'owl', 'pencil', 'quilt', 'rainbow',
    'snake', 'train', 'unicorn', 'volcano', 'watch', 'box', 'yo-yo', 'zipper',
]


class Vocabulary:
    """Word list the drawer's candidates are drawn from."""

    def __init__(self, words: Iterable[str], rng: Optional[random.Random] = None):
        seen = set()
        self.words: List[str] = []
        for word in words:
            word = word.strip()
            if word and word.lower() not in seen:
                seen.add(word.lower())
                self.words.append(word)
        self.rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: str, rng: Optional[random.Random] = None) -> 'Vocabulary':
        with open(path, encoding='utf-8') as fh:
            return cls(fh.read().splitlines(), rng=rng)

    @classmethod
    def from_config(cls, config) -> 'Vocabulary':
        path = config.get('WORDS_FILE')
        if path:
            return cls.from_file(path)
        return cls(DEFAULT_WORDS)

    def pick(self, count: int) -> List[str]:
        """Return ``count`` distinct words (all of them if the list is shorter)."""
        return self.rng.sample(self.words, min(count, len(self.words)))

    def __len__(self):
        return len(self.words)
