"""
Trigram HMM Tagger

Viterbi decoding over tag pairs with beam pruning, in the manner of
Brants' TnT tagger: TnT: A Statistical Part-of-Speech Tagger, Thorsten
Brants, ANLC '00.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .corpus import START_TOKEN, END_TOKEN, add_sentence_markers
from .errors import DecodingError, EmptyEmissionError
from .model import Model, Tag
from .smoothing import TrigramModel
from .words import WordHandler


logger = logging.getLogger(__name__)


class Backpointer(NamedTuple):
    """Best predecessor two columns back (index into that column) and path score."""
    state: Optional[int]
    prob: float


@dataclass
class TrellisState:
    """
    A tag in a trellis column.

    `backpointers` maps the index of a state in the previous column (t2) to
    the best state two columns back (t1) for the pair (t2, this tag).
    """
    tag: Tag
    backpointers: Dict[int, Backpointer] = field(default_factory=dict)


class Trellis:
    """The trellis of a tagged sentence, one column per token including markers."""

    def __init__(self, columns: List[List[TrellisState]], model: Model):
        self.columns = columns
        self.model = model

    def tags(self) -> Tuple[List[str], float]:
        """Return the most likely tag sequence and its log probability."""
        tag_numbers, prob = self.highest_probability_sequence()
        numberer = self.model.tag_numberer
        # Strip the start and end markers.
        return [numberer.label(number) for number in tag_numbers[2:-1]], prob

    def highest_probability_sequence(self) -> Tuple[List[int], float]:
        highest_prob = -math.inf
        tail = before_tail = None

        # Find the most probable state pair in the last column.
        for idx, state in enumerate(self.columns[-1]):
            for prev_idx, bp in state.backpointers.items():
                if bp.prob > highest_prob:
                    highest_prob = bp.prob
                    tail, before_tail = idx, prev_idx

        if tail is None:
            raise DecodingError("No terminal state while extracting the highest "
                                "probability sequence; the beam pruned every path")

        tag_sequence = []
        col = len(self.columns) - 1
        while True:
            state = self.columns[col][tail]
            tag_sequence.append(state.tag.tag)

            if before_tail is None:
                break

            tail, before_tail = before_tail, state.backpointers[before_tail].state
            col -= 1

        tag_sequence.reverse()
        return tag_sequence, highest_prob


class HMMTagger:
    """
    Hidden Markov Model part-of-speech tagger.

    The beam factor specifies how aggressively the search space is pruned:
    with a beam factor of 1000, all paths that are more than 1000 times
    less probable than the most probable path at a position are dropped.
    `math.inf` disables pruning; a factor below 1 leaves no path through
    any non-empty sentence.

    The tagger is read-only after construction; concurrent calls to `tag`
    each build their own trellis.
    """

    def __init__(self, model: Model, word_handler: WordHandler,
                 trigram_model: TrigramModel, beam_factor: float = 1000.0):
        self.model = model
        self.word_handler = word_handler
        self.trigram_model = trigram_model
        self.beam_factor = beam_factor
        self._log_beam = math.log(beam_factor)
        self._start_tag = Tag(model.tag_numberer.index(START_TOKEN), False)

    def tag(self, sentence: Sequence[str]) -> Tuple[List[str], float]:
        """
        Tag a sentence.

        Args:
            sentence: Tokens of the sentence

        Returns:
            Tuple of (tags aligned with the tokens, log probability)
        """
        return self.trellis(sentence).tags()

    def trellis(self, sentence: Sequence[str]) -> Trellis:
        tokens = add_sentence_markers(sentence)
        return Trellis(self._viterbi(tokens), self.model)

    def tag_sentences(self, sentences: Sequence[Sequence[str]],
                      max_workers: Optional[int] = None) -> List[Tuple[List[str], float]]:
        """Tag independent sentences concurrently, preserving their order."""
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.tag, sentences))

    def _viterbi(self, tokens: List[str]) -> List[List[TrellisState]]:
        start = self._start_tag
        columns = [
            [TrellisState(start)],
            [TrellisState(start, {0: Backpointer(None, 0.0)})],
        ]

        beam = 0.0

        for i in range(2, len(tokens)):
            column_highest_prob = -math.inf

            tag_probs = self.word_handler.tag_probs(tokens[i])
            if not tag_probs:
                raise EmptyEmissionError(tokens[i])

            before_previous, previous = columns[-2], columns[-1]
            column = []

            for tag, tag_prob in tag_probs.items():
                state = TrellisState(tag)

                # Loop over all possible trigrams.
                for t2_idx, t2 in enumerate(previous):
                    highest_prob = -math.inf
                    highest_prob_bp = None

                    for t1_idx, t1_bp in t2.backpointers.items():
                        if t1_bp.prob < beam:
                            continue

                        t1 = before_previous[t1_idx]
                        prob = (self.trigram_model.trigram_prob(t1.tag, t2.tag, tag)
                                + tag_prob + t1_bp.prob)

                        if prob > highest_prob:
                            highest_prob = prob
                            highest_prob_bp = t1_idx

                    if highest_prob_bp is not None:
                        state.backpointers[t2_idx] = Backpointer(highest_prob_bp, highest_prob)
                        column_highest_prob = max(column_highest_prob, highest_prob)

                column.append(state)

            columns.append(column)
            beam = column_highest_prob - self._log_beam

        return columns
