"""
Tag Model: Frequency Tables

This module contains the frequency tables of a trigram HMM tagger and the
collector that builds them from tagged sentences.
"""

import logging
import pickle
from collections import Counter, defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .corpus import START_TOKEN, END_TOKEN, TaggedSentence, add_sentence_markers
from .errors import UnknownTagError


logger = logging.getLogger(__name__)


class Tag(NamedTuple):
    """
    A part-of-speech tag.

    `tag` is the number assigned by the tag numberer; `capital` marks
    whether the corresponding word started with a capital letter.
    """
    tag: int
    capital: bool = False


Bigram = Tuple[Tag, Tag]
Trigram = Tuple[Tag, Tag, Tag]


def is_capitalized(word: str) -> bool:
    return word[:1].isupper()


class TagNumberer:
    """A bijection between tag labels and small integers."""

    def __init__(self, labels: Optional[Iterable[str]] = None):
        self._labels: List[str] = []
        self._numbers: Dict[str, int] = {}
        for label in labels or ():
            self.number(label)

    def number(self, label: str) -> int:
        """Return the number for a label, assigning the next one if it is new."""
        idx = self._numbers.get(label)
        if idx is None:
            idx = len(self._labels)
            self._numbers[label] = idx
            self._labels.append(label)
        return idx

    def index(self, label: str) -> int:
        """Return the number for a known label."""
        try:
            return self._numbers[label]
        except KeyError:
            raise UnknownTagError(label) from None

    def label(self, number: int) -> str:
        return self._labels[number]

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def __len__(self):
        return len(self._labels)

    def __contains__(self, label):
        return label in self._numbers

    def write(self, path: Union[str, Path]) -> None:
        """Write the labels, one per line, in number order."""
        with open(path, 'w', encoding='utf-8') as f:
            for label in self._labels:
                f.write(f"{label}\n")


class Model:
    """
    Frequency tables of the training data.

    Attributes:
        tag_numberer: Tag label <-> number bijection
        word_tag_freqs: word -> (Tag -> count)
        unigram_freqs: Tag -> count
        bigram_freqs: (Tag, Tag) -> count
        trigram_freqs: (Tag, Tag, Tag) -> count
    """

    def __init__(self, tag_numberer: TagNumberer,
                 word_tag_freqs: Dict[str, Dict[Tag, int]],
                 unigram_freqs: Dict[Tag, int],
                 bigram_freqs: Dict[Bigram, int],
                 trigram_freqs: Dict[Trigram, int]):
        self._tag_numberer = tag_numberer
        self._word_tag_freqs = word_tag_freqs
        self._unigram_freqs = unigram_freqs
        self._bigram_freqs = bigram_freqs
        self._trigram_freqs = trigram_freqs

    @property
    def tag_numberer(self) -> TagNumberer:
        return self._tag_numberer

    @property
    def word_tag_freqs(self) -> Dict[str, Dict[Tag, int]]:
        return self._word_tag_freqs

    @property
    def unigram_freqs(self) -> Dict[Tag, int]:
        return self._unigram_freqs

    @property
    def bigram_freqs(self) -> Dict[Bigram, int]:
        return self._bigram_freqs

    @property
    def trigram_freqs(self) -> Dict[Trigram, int]:
        return self._trigram_freqs

    def corpus_size(self) -> int:
        return sum(self._unigram_freqs.values())

    def summary(self) -> Dict:
        """Statistics of the tables, for display."""
        return {
            'tags': len(self._tag_numberer),
            'words': len(self._word_tag_freqs),
            'unigrams': len(self._unigram_freqs),
            'bigrams': len(self._bigram_freqs),
            'trigrams': len(self._trigram_freqs),
            'corpus_size': self.corpus_size(),
        }

    def __str__(self):
        return (f"{len(self._word_tag_freqs)} words, {len(self._unigram_freqs)} unigrams, "
                f"{len(self._bigram_freqs)} bigrams, {len(self._trigram_freqs)} trigrams")

    def save(self, path: Union[str, Path]) -> None:
        """Save the model to a file."""
        data = {
            'tags': self._tag_numberer.labels,
            'word_tag_freqs': {w: dict(tf) for w, tf in self._word_tag_freqs.items()},
            'unigram_freqs': dict(self._unigram_freqs),
            'bigram_freqs': dict(self._bigram_freqs),
            'trigram_freqs': dict(self._trigram_freqs),
        }

        with open(path, 'wb') as f:
            pickle.dump(data, f)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Model':
        """Load a model from a file."""
        with open(path, 'rb') as f:
            data = pickle.load(f)

        model = cls(
            TagNumberer(data['tags']),
            data['word_tag_freqs'],
            data['unigram_freqs'],
            data['bigram_freqs'],
            data['trigram_freqs'],
        )
        logger.info("Loaded model from %s: %s", path, model)
        return model


class FrequencyCollector:
    """
    Collects the frequencies from a training corpus that are relevant to a
    trigram HMM tagger.
    """

    def __init__(self):
        self.numberer = TagNumberer()
        self.lexicon: Dict[str, Counter] = defaultdict(Counter)
        self.unigrams: Counter = Counter()
        self.bigrams: Counter = Counter()
        self.trigrams: Counter = Counter()
        self.num_sentences = 0

    def process(self, sentence: TaggedSentence) -> None:
        """
        Count the tag n-grams and word/tag pairs of a tagged sentence.

        Raises:
            ValueError: if a token has an empty form or tag
        """
        words = add_sentence_markers([form for form, _ in sentence])
        labels = add_sentence_markers([tag for _, tag in sentence])

        tags = []
        for word, label in zip(words, labels):
            if not word:
                raise ValueError(f"Token does not contain a form: {sentence}")
            if not label:
                raise ValueError(f"Token does not contain a part-of-speech: {word!r}")
            tags.append(Tag(self.numberer.number(label), is_capitalized(word)))

        for i, (word, tag) in enumerate(zip(words, tags)):
            self.lexicon[word][tag] += 1
            self.unigrams[tag] += 1
            if i > 0:
                self.bigrams[(tags[i - 1], tag)] += 1
            if i > 1:
                self.trigrams[(tags[i - 2], tags[i - 1], tag)] += 1

        self.num_sentences += 1

    def process_all(self, sentences: Iterable[TaggedSentence],
                    progress_callback=None) -> None:
        """
        Process a corpus.

        Args:
            sentences: Tagged sentences
            progress_callback: Optional callback(current) every 1000 sentences
        """
        for idx, sent in enumerate(sentences, start=1):
            self.process(sent)
            if progress_callback and idx % 1000 == 0:
                progress_callback(idx)

    def model(self) -> Model:
        """Return the collected frequencies as a model."""
        return Model(
            self.numberer,
            {word: dict(freqs) for word, freqs in self.lexicon.items()},
            dict(self.unigrams),
            dict(self.bigrams),
            dict(self.trigrams),
        )


def train_model(sentences: Iterable[TaggedSentence]) -> Model:
    """Collect a model from tagged sentences."""
    collector = FrequencyCollector()
    collector.process_all(sentences)
    model = collector.model()
    logger.info("Collected %d sentences: %s", collector.num_sentences, model)
    return model


def marker_tag_numbers(model: Model) -> set:
    """Numbers of the start/end marker tags present in the model."""
    numberer = model.tag_numberer
    return {numberer.index(t) for t in (START_TOKEN, END_TOKEN) if t in numberer}
