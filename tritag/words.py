"""
Emission Probabilities for Known Words

A trigram HMM tagger needs, besides transition probabilities, the emission
probabilities P(w|t). For words seen in the training data these are the
maximum likelihood estimates f(w,t) / f(t); words that were not seen are
handed to a fallback estimator such as the suffix handlers in
`tritag.suffix`.
"""

import math
import re
from typing import Dict, List, NamedTuple, Optional, Pattern

from .model import Tag, is_capitalized


TagProbs = Dict[Tag, float]


class WordHandler:
    """Base class for emission probability estimators."""

    def tag_probs(self, word: str) -> TagProbs:
        """
        Return log P(w|t) for the candidate tags of a word.

        The returned mapping is shared and must not be modified.
        """
        raise NotImplementedError


def calculate_word_tag_probs(word_tag_freqs: Dict[str, Dict[Tag, int]],
                             unigram_freqs: Dict[Tag, int]) -> Dict[str, TagProbs]:
    # P(w|t) = f(w,t) / f(t)
    return {
        word: {tag: math.log(freq / unigram_freqs[tag]) for tag, freq in counts.items()}
        for word, counts in word_tag_freqs.items()
    }


class Lexicon(WordHandler):
    """
    Emission probability estimator for words seen in the training data.

    Probabilities are only returned for tags that the word occurred with,
    unless the word is unknown and a fallback is available.
    """

    def __init__(self, word_tag_freqs: Dict[str, Dict[Tag, int]],
                 unigram_freqs: Dict[Tag, int],
                 fallback: Optional[WordHandler] = None):
        self.word_tag_probs = calculate_word_tag_probs(word_tag_freqs, unigram_freqs)
        self.fallback = fallback

    def lookup(self, word: str) -> TagProbs:
        """Lexicon lookup without the fallback."""
        probs = self.word_tag_probs.get(word)
        if probs is not None:
            return probs

        # Capitalized words that start a sentence may be known in lowercase.
        if is_capitalized(word):
            probs = self.word_tag_probs.get(word.lower())
            if probs is not None:
                return probs

        return {}

    def __contains__(self, word):
        return word in self.word_tag_probs

    def tag_probs(self, word: str) -> TagProbs:
        probs = self.lookup(word)
        if probs or self.fallback is None:
            return probs
        return self.fallback.tag_probs(word)


class Substitution(NamedTuple):
    pattern: Pattern
    replacement: str

    @classmethod
    def compile(cls, pattern: str, replacement: str) -> 'Substitution':
        try:
            return cls(re.compile(pattern), replacement)
        except re.error as e:
            raise ValueError(f"Invalid substitution pattern {pattern!r}: {e}") from e

    def apply(self, word: str) -> str:
        return self.pattern.sub(self.replacement, word)


class SubstLexicon(WordHandler):
    """
    A lexicon with substitution rules.

    If the lexicon has no entry for a word, the substitutions are applied
    in order and another lookup is attempted. If this fails as well, the
    fallback is used with the original word.
    """

    def __init__(self, lexicon: Lexicon, substitutions: List[Substitution],
                 fallback: Optional[WordHandler] = None):
        self.lexicon = lexicon
        self.substitutions = substitutions
        self.fallback = fallback

    def tag_probs(self, word: str) -> TagProbs:
        probs = self.lexicon.lookup(word)
        if probs:
            return probs

        subst_word = word
        for subst in self.substitutions:
            subst_word = subst.apply(subst_word)

        probs = self.lexicon.lookup(subst_word)
        if probs:
            return probs

        if self.fallback is not None:
            return self.fallback.tag_probs(word)

        return probs
