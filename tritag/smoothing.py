"""
Smoothing Methods for Tag Transition Probabilities

This module estimates the transition probabilities P(t3 | t1, t2) of a
trigram HMM tagger, smoothing against tag trigrams that are rare or unseen
in the training data.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict

from .errors import UnknownTagError
from .model import Bigram, Model, Tag, Trigram


logger = logging.getLogger(__name__)


def log_prob(prob: float) -> float:
    """Natural logarithm that maps a zero probability to -inf."""
    return math.log(prob) if prob > 0 else float('-inf')


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


class TrigramModel:
    """Base class for transition probability estimators."""

    def trigram_prob(self, t1: Tag, t2: Tag, t3: Tag) -> float:
        """Return log P(t3 | t1, t2)."""
        raise NotImplementedError


@dataclass(frozen=True)
class SmoothingParameters:
    """Interpolation weights; l1 + l2 + l3 = 1."""
    l1: float
    l2: float
    l3: float


def calculate_lambdas(corpus_size: int, unigram_freqs: Dict[Tag, int],
                      bigram_freqs: Dict[Bigram, int],
                      trigram_freqs: Dict[Trigram, int]) -> SmoothingParameters:
    """
    Estimate interpolation weights by deleted interpolation (Brants, 2000).

    Each trigram votes with its frequency for the n-gram order whose
    leave-one-out estimate is highest:

        unigram:  (f(t3) - 1) / (N - 1)
        bigram:   (f(t2,t3) - 1) / (f(t2) - 1)
        trigram:  (f(t1,t2,t3) - 1) / (f(t1,t2) - 1)

    An estimate with a zero denominator is 0. Ties go to the lower order.

    Raises:
        ValueError: if there are no trigrams to estimate from
    """
    l1f = l2f = l3f = 0

    for (t1, t2, t3), t1t2t3_freq in trigram_freqs.items():
        l3p = 0.0
        t1t2_freq = bigram_freqs.get((t1, t2))
        if t1t2_freq:
            l3p = _ratio(t1t2t3_freq - 1, t1t2_freq - 1)

        l2p = 0.0
        t2t3_freq = bigram_freqs.get((t2, t3))
        t2_freq = unigram_freqs.get(t2)
        if t2t3_freq and t2_freq:
            l2p = _ratio(t2t3_freq - 1, t2_freq - 1)

        l1p = 0.0
        t3_freq = unigram_freqs.get(t3)
        if t3_freq:
            l1p = _ratio(t3_freq - 1, corpus_size - 1)

        if l1p >= l2p and l1p >= l3p:
            l1f += t1t2t3_freq
        elif l2p > l1p and l2p > l3p:
            l2f += t1t2t3_freq
        else:
            l3f += t1t2t3_freq

    total = l1f + l2f + l3f
    if total == 0:
        raise ValueError("Cannot estimate smoothing parameters without trigrams")

    return SmoothingParameters(l1f / total, l2f / total, l3f / total)


class LinearInterpolationModel(TrigramModel):
    """
    Linear Interpolation Smoothing

    P(t3|t1,t2) = l1 * P(t3) + l2 * P(t3|t2) + l3 * P(t3|t1,t2)

    Where the P are maximum likelihood estimates and the weights are
    estimated by deleted interpolation. Log-probabilities are precomputed
    for every unigram, bigram and trigram seen in the training data;
    unseen trigrams back off to the bigram (t2, t3), then to the unigram t3.
    """

    def __init__(self, model: Model):
        unigram_freqs = model.unigram_freqs
        bigram_freqs = model.bigram_freqs
        trigram_freqs = model.trigram_freqs

        corpus_size = model.corpus_size()
        self.parameters = calculate_lambdas(corpus_size, unigram_freqs,
                                            bigram_freqs, trigram_freqs)
        l1, l2, l3 = self.parameters.l1, self.parameters.l2, self.parameters.l3
        logger.debug("Smoothing parameters: l1=%.4f l2=%.4f l3=%.4f", l1, l2, l3)

        self.unigram_probs: Dict[Tag, float] = {
            tag: log_prob(l1 * freq / corpus_size)
            for tag, freq in unigram_freqs.items()
        }

        self.bigram_probs: Dict[Bigram, float] = {}
        for (t1, t2), freq in bigram_freqs.items():
            unigram_prob = unigram_freqs[t2] / corpus_size
            bigram_prob = freq / unigram_freqs[t1]
            self.bigram_probs[(t1, t2)] = log_prob(l1 * unigram_prob + l2 * bigram_prob)

        self.trigram_probs: Dict[Trigram, float] = {}
        for (t1, t2, t3), freq in trigram_freqs.items():
            unigram_prob = unigram_freqs[t3] / corpus_size
            bigram_prob = bigram_freqs[(t2, t3)] / unigram_freqs[t2]
            trigram_prob = freq / bigram_freqs[(t1, t2)]
            self.trigram_probs[(t1, t2, t3)] = log_prob(
                l1 * unigram_prob + l2 * bigram_prob + l3 * trigram_prob)

    def trigram_prob(self, t1: Tag, t2: Tag, t3: Tag) -> float:
        prob = self.trigram_probs.get((t1, t2, t3))
        if prob is not None:
            return prob

        prob = self.bigram_probs.get((t2, t3))
        if prob is not None:
            return prob

        prob = self.unigram_probs.get(t3)
        if prob is not None:
            return prob

        raise UnknownTagError(t3)
