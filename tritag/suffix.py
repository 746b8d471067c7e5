"""
Suffix-Based Emission Probabilities for Unknown Words

Words that were not seen in the training data get emission probabilities
from the statistics of word suffixes (Brants, 2000). The words are split
into four classes by their shape, each with its own suffix tree:

    1. words that start with an uppercase letter
    2. cardinals (numbers, ordinals, dates)
    3. words that contain a dash
    4. remaining words, typically lowercase

Only low-frequency training words feed the trees: the distribution of
unknown words resembles that of rare words more than frequent ones.
"""

import heapq
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

from .corpus import START_TOKEN, END_TOKEN
from .model import Model, Tag, is_capitalized, marker_tag_numbers
from .smoothing import log_prob
from .words import TagProbs, WordHandler


logger = logging.getLogger(__name__)

CARDINAL_PATTERN = re.compile(
    r'^([0-9]+)|([0-9]+\.)|([0-9.,:-]+[0-9]+)|([0-9]+[a-zA-Z]{1,3})$')


class WordClass(Enum):
    """Word shape classes, each with its own suffix tree."""
    UPPER = "upper"
    CARDINAL = "cardinal"
    DASH = "dash"
    LOWER = "lower"


def word_class(word: str) -> WordClass:
    """Classify a word by its shape."""
    if is_capitalized(word):
        return WordClass.UPPER
    if CARDINAL_PATTERN.search(word):
        return WordClass.CARDINAL
    if '-' in word:
        return WordClass.DASH
    return WordClass.LOWER


@dataclass
class SuffixHandlerConfig:
    """
    Configuration of the suffix handlers.

    The defaults work reasonably well on German and English corpora of
    approximately 50,000 to 100,000 sentences. Good suffix lengths depend
    heavily on the language; good frequency ceilings on the corpus size.
    """
    max_suffix_len: int = 2
    upper_max_freq: int = 2
    lower_max_freq: int = 8
    dash_max_freq: int = 4
    cardinal_max_freq: int = 10
    max_tags: int = 10

    def max_freq(self, cls: WordClass) -> int:
        return {
            WordClass.UPPER: self.upper_max_freq,
            WordClass.CARDINAL: self.cardinal_max_freq,
            WordClass.DASH: self.dash_max_freq,
            WordClass.LOWER: self.lower_max_freq,
        }[cls]


def calculate_theta(unigram_freqs: Dict[Tag, int], skip: Set[int]) -> float:
    """
    Standard deviation of the tag unigram probabilities.

    Theta determines how much the probabilities of shorter suffixes are
    weighted when estimating the probabilities of a longer suffix.
    """
    n = len(unigram_freqs)
    if n < 2:
        return 0.0

    p_avg = 1.0 / n
    freqs = [freq for tag, freq in unigram_freqs.items() if tag.tag not in skip]
    freq_sum = sum(freqs)
    if freq_sum == 0:
        return 0.0

    stddev_sum = sum((freq / freq_sum - p_avg) ** 2 for freq in freqs)
    return math.sqrt(stddev_sum / (n - 1))


def best_n_log_space(tag_probs: Dict[Tag, float], n: int) -> TagProbs:
    """Keep the n most probable tags and convert their probabilities to log space."""
    best = heapq.nlargest(n, tag_probs.items(), key=lambda item: item[1])
    return {tag: log_prob(prob) for tag, prob in best}


def bayesian_inversion(unigram_freqs: Dict[Tag, int], tag_probs: Dict[Tag, float]) -> None:
    """Turn P(t|suffix) into a score proportional to P(suffix|t), in place."""
    for tag, prob in tag_probs.items():
        tag_probs[tag] = prob / unigram_freqs[tag]


class TreeNode:
    """A suffix tree node; children are keyed by the next reversed character."""

    __slots__ = ('children', 'tag_freqs', 'tag_freq')

    def __init__(self):
        self.children: Dict[str, 'TreeNode'] = {}
        self.tag_freqs: Dict[Tag, int] = {}
        self.tag_freq = 0

    def add_freqs(self, tag_freqs: Dict[Tag, int]) -> None:
        for tag, freq in tag_freqs.items():
            self.tag_freqs[tag] = self.tag_freqs.get(tag, 0) + freq
            self.tag_freq += freq

    def smooth(self, theta: float, tag_probs: Dict[Tag, float]) -> None:
        """Interpolate this node's distribution with that of the shorter suffix, in place."""
        for tag, prob in tag_probs.items():
            node_prob = 0.0
            freq = self.tag_freqs.get(tag)
            if freq is not None:
                node_prob = freq / self.tag_freq

            tag_probs[tag] = (node_prob + theta * prob) / (theta + 1)

    def __len__(self):
        return 1 + sum(len(child) for child in self.children.values())


class WordSuffixTree:
    """Suffix tree of one word class."""

    def __init__(self, unigram_freqs: Dict[Tag, int], skip: Set[int],
                 theta: float, max_length: int):
        self.unigram_freqs = unigram_freqs
        self.theta = theta
        self.max_length = max_length

        self.root = TreeNode()
        self.root.add_freqs({tag: freq for tag, freq in unigram_freqs.items()
                             if tag.tag not in skip})

    def reversed_suffix(self, word: str) -> str:
        return word[::-1][:self.max_length]

    def add_word(self, word: str, tag_freqs: Dict[Tag, int]) -> None:
        """Add the tag frequencies of a word to every node on its suffix path."""
        node = self.root
        for char in self.reversed_suffix(word):
            child = node.children.get(char)
            if child is None:
                child = node.children[char] = TreeNode()
            child.add_freqs(tag_freqs)
            node = child

    def suffix_tag_probs(self, word: str) -> Dict[Tag, float]:
        """Smoothed, inverted tag probabilities of the longest known suffix of a word."""
        tag_probs = dict.fromkeys(self.root.tag_freqs, 0.0)

        node = self.root
        node.smooth(self.theta, tag_probs)
        for char in self.reversed_suffix(word):
            node = node.children.get(char)
            if node is None:
                break
            node.smooth(self.theta, tag_probs)

        bayesian_inversion(self.unigram_freqs, tag_probs)
        return tag_probs

    def precompute(self, max_tags: int) -> Dict[str, TagProbs]:
        """Best-n log probabilities of every suffix in the tree, keyed by reversed suffix."""
        probs: Dict[str, TagProbs] = {}
        stack = [(self.root, "", dict.fromkeys(self.root.tag_freqs, 0.0))]
        while stack:
            node, suffix, tag_probs = stack.pop()
            node.smooth(self.theta, tag_probs)
            for char, child in node.children.items():
                stack.append((child, suffix + char, dict(tag_probs)))

            bayesian_inversion(self.unigram_freqs, tag_probs)
            probs[suffix] = best_n_log_space(tag_probs, max_tags)

        return probs


class SuffixHandler(WordHandler):
    """
    Emission probability estimator that uses word suffixes. It is normally
    used as the fallback of a `Lexicon`, for words that were not seen in
    the training data.
    """

    def __init__(self, config: SuffixHandlerConfig, model: Model):
        self.config = config
        self.max_tags = config.max_tags

        skip = marker_tag_numbers(model)
        self.theta = calculate_theta(model.unigram_freqs, skip)
        logger.debug("Suffix smoothing theta: %.6f", self.theta)

        self.trees: Dict[WordClass, WordSuffixTree] = {
            cls: WordSuffixTree(model.unigram_freqs, skip, self.theta, config.max_suffix_len)
            for cls in WordClass
        }

        for word, tag_freqs in model.word_tag_freqs.items():
            if word in (START_TOKEN, END_TOKEN) or not word:
                continue

            cls = word_class(word)
            if sum(tag_freqs.values()) <= config.max_freq(cls):
                self.trees[cls].add_word(word, tag_freqs)

        logger.debug("Suffix tree sizes: %s",
                     {cls.value: len(tree.root) for cls, tree in self.trees.items()})

    def tag_probs(self, word: str) -> TagProbs:
        tree = self.trees[word_class(word)]
        return best_n_log_space(tree.suffix_tag_probs(word), self.max_tags)


class LookupSuffixHandler(WordHandler):
    """
    Precomputed variant of `SuffixHandler`.

    The distributions of all suffixes in the trees are computed once, so
    that tagging only needs dictionary lookups of successively shorter
    suffixes.
    """

    def __init__(self, handler: SuffixHandler):
        self.max_length = handler.config.max_suffix_len
        self.probs: Dict[WordClass, Dict[str, TagProbs]] = {
            cls: tree.precompute(handler.max_tags)
            for cls, tree in handler.trees.items()
        }

    def tag_probs(self, word: str) -> TagProbs:
        probs = self.probs[word_class(word)]

        suffix = word[::-1][:self.max_length]
        while suffix:
            tag_probs = probs.get(suffix)
            if tag_probs is not None:
                return tag_probs
            suffix = suffix[:-1]

        return probs[suffix]


class UnknownHandler(Enum):
    """Available unknown word handlers."""
    TREE = "tree"       # walk the suffix trees for every word
    LOOKUP = "lookup"   # precomputed suffix distributions


def get_unknown_handler(method: UnknownHandler, model: Model,
                        config: Optional[SuffixHandlerConfig] = None) -> WordHandler:
    """Factory function to create the appropriate unknown word handler."""
    handler = SuffixHandler(config or SuffixHandlerConfig(), model)
    if method == UnknownHandler.TREE:
        return handler
    elif method == UnknownHandler.LOOKUP:
        return LookupSuffixHandler(handler)
    else:
        raise ValueError(f"Unknown word handler: {method}")
