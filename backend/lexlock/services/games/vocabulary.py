import random
from typing import List, NamedTuple, Optional


class WordEntry(NamedTuple):
    word: str
    clue: str


BUSINESS_WORDS_POOL: List[WordEntry] = [
    WordEntry('FINTECH', 'The fusion of finance and technology'),
    WordEntry('DATA', 'Raw facts and figures for analysis'),
    WordEntry('STRATEGY', 'A plan of action to achieve goals'),
    WordEntry('MARKETING', 'The study of markets and promotion'),
    WordEntry('ENTREPRENEUR', 'Someone who starts a business venture'),
    WordEntry('HUMANCAPITAL', 'The skills and knowledge of workers'),
    WordEntry('LOGISTICS', 'Managing the flow of goods'),
    WordEntry('ANALYTICS', 'Systematic analysis of data'),
    WordEntry('ADAPTATION', 'Adjusting to new conditions'),
    WordEntry('INNOVATION', 'Introducing new ideas or methods'),
    WordEntry('RISK', 'Potential for loss or uncertainty'),
    WordEntry('ETHICS', 'Moral principles in business'),
    WordEntry('REVENUE', 'Income generated from business activities'),
    WordEntry('PROFIT', 'Financial gain after expenses'),
    WordEntry('INVESTMENT', 'Allocating resources for future returns'),
    WordEntry('BRAND', "A company's identity and reputation"),
    WordEntry('SUPPLY', 'The quantity of goods available'),
    WordEntry('DEMAND', 'Consumer desire for products'),
    WordEntry('EQUITY', 'Ownership interest in a company'),
    WordEntry('CAPITAL', 'Financial resources for business'),
    WordEntry('ASSETS', 'Resources owned by a business'),
    WordEntry('MARKET', 'Where buyers and sellers meet'),
    WordEntry('CONSUMER', 'A person who purchases goods'),
    WordEntry('GROWTH', 'Expansion of business operations'),
]


class Vocabulary:
    """A pool of (word, clue) pairs the grid generator samples from."""

    def __init__(self, entries: Optional[List[WordEntry]] = None, rng: Optional[random.Random] = None):
        self.entries = [WordEntry(e.word.upper(), e.clue) for e in (entries or BUSINESS_WORDS_POOL)]
        self.rng = rng or random.Random()

    def __len__(self):
        return len(self.entries)

    def sample(self, count: int) -> List[WordEntry]:
        """Pick ``count`` distinct entries; clues get a length hint."""
        count = max(0, min(count, len(self.entries)))
        picked = self.rng.sample(self.entries, count)
        return [WordEntry(e.word, f'{e.clue} ({len(e.word)} letters)') for e in picked]
