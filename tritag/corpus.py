"""
Corpus Loading and Preprocessing

This module handles loading tagged corpora (the Brown corpus through NLTK,
CoNLL-X files, plain text) and splitting them into cross-validation folds.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Tuple, Union

import nltk
from nltk.corpus import brown


logger = logging.getLogger(__name__)

# Sentence markers
START_TOKEN = "<START>"
END_TOKEN = "<END>"

# A tagged sentence is a list of (form, tag) pairs.
TaggedSentence = List[Tuple[str, str]]

CONLLX_FIELDS = 10
FORM_COLUMN = 1
POSTAG_COLUMN = 4


def ensure_nltk_data():
    """Download required NLTK data if not present."""
    try:
        nltk.data.find('corpora/brown')
    except LookupError:
        logger.info("Downloading Brown corpus...")
        nltk.download('brown', quiet=True)

    try:
        nltk.data.find('taggers/universal_tagset')
    except LookupError:
        logger.info("Downloading universal tagset mapping...")
        nltk.download('universal_tagset', quiet=True)


def add_sentence_markers(tokens: List[str], n: int = 3) -> List[str]:
    """
    Add start and end markers to a sentence.

    Args:
        tokens: List of tokens in the sentence
        n: The order of the tag model (determines number of start markers)

    Returns:
        Tokens with (n-1) start markers and one end marker
    """
    return [START_TOKEN] * (n - 1) + list(tokens) + [END_TOKEN]


def load_brown_tagged(categories: Optional[List[str]] = None,
                      tagset: Optional[str] = 'universal',
                      min_sentence_length: int = 1) -> Tuple[List[TaggedSentence], dict]:
    """
    Load the part-of-speech tagged Brown corpus.

    Args:
        categories: Optional list of Brown corpus categories to load
                   (e.g., ['news', 'fiction']). If None, loads all categories.
        tagset: Tagset to map to ('universal'), or None for the original
                Brown tags
        min_sentence_length: Minimum number of words in a sentence

    Returns:
        Tuple of (list of tagged sentences, corpus statistics dict)
    """
    ensure_nltk_data()

    if categories:
        sents = brown.tagged_sents(categories=categories, tagset=tagset)
    else:
        sents = brown.tagged_sents(tagset=tagset)

    sentences = []
    total_tokens = 0

    for sent in sents:
        if len(sent) >= min_sentence_length:
            sentences.append([(form, tag) for form, tag in sent])
            total_tokens += len(sent)

    stats = {
        'num_sentences': len(sentences),
        'total_tokens': total_tokens,
        'categories': categories or brown.categories(),
        'tagset': tagset or 'brown',
    }

    return sentences, stats


def get_brown_categories() -> List[str]:
    """Return list of available Brown corpus categories."""
    ensure_nltk_data()
    return brown.categories()


@dataclass
class ConllToken:
    """A CoNLL-X token line, kept whole so that tagging can rewrite POSTAG."""
    fields: List[str]

    @property
    def form(self) -> str:
        return self.fields[FORM_COLUMN]

    @property
    def postag(self) -> str:
        return self.fields[POSTAG_COLUMN]

    @postag.setter
    def postag(self, tag: str):
        self.fields[POSTAG_COLUMN] = tag

    def __str__(self):
        return "\t".join(self.fields)


def _open_text(source: Union[str, Path, IO[str]]):
    if isinstance(source, (str, Path)):
        return open(source, encoding='utf-8')
    return source


def read_conllx(source: Union[str, Path, IO[str]]) -> Iterator[List[ConllToken]]:
    """
    Read sentences from a CoNLL-X file.

    Sentences are separated by blank lines; each token line must have ten
    tab-separated fields.

    Raises:
        ValueError: if a token line does not have ten fields
    """
    f = _open_text(source)
    try:
        sentence: List[ConllToken] = []
        for lineno, line in enumerate(f, start=1):
            line = line.rstrip('\n')
            if not line.strip():
                if sentence:
                    yield sentence
                    sentence = []
                continue

            fields = line.split('\t')
            if len(fields) != CONLLX_FIELDS:
                raise ValueError(f"Line {lineno}: expected {CONLLX_FIELDS} fields, "
                                 f"got {len(fields)}: {line!r}")
            sentence.append(ConllToken(fields))

        if sentence:
            yield sentence
    finally:
        if f is not source:
            f.close()


def write_conllx(sentences: Iterable[List[ConllToken]], target: IO[str]) -> None:
    """Write sentences in CoNLL-X format, one blank line after each sentence."""
    for sentence in sentences:
        for token in sentence:
            target.write(f"{token}\n")
        target.write("\n")


def conllx_tagged(sentence: List[ConllToken]) -> TaggedSentence:
    """
    Convert a CoNLL-X sentence to (form, tag) pairs.

    Raises:
        ValueError: if a token has no part-of-speech tag
    """
    tagged = []
    for token in sentence:
        if token.postag == '_':
            raise ValueError(f"Token does not contain a part-of-speech: {token}")
        tagged.append((token.form, token.postag))
    return tagged


def load_conllx_tagged(path: Union[str, Path]) -> Tuple[List[TaggedSentence], dict]:
    """Load all tagged sentences of a CoNLL-X file with corpus statistics."""
    sentences = [conllx_tagged(sent) for sent in read_conllx(path)]
    stats = {
        'num_sentences': len(sentences),
        'total_tokens': sum(len(sent) for sent in sentences),
        'source': str(path),
    }
    return sentences, stats


def read_plain(source: Union[str, Path, IO[str]]) -> Iterator[List[str]]:
    """Read whitespace-tokenized sentences, one per non-empty line."""
    f = _open_text(source)
    try:
        for line in f:
            tokens = line.split()
            if tokens:
                yield tokens
    finally:
        if f is not source:
            f.close()


def split_folds(sentences: List[TaggedSentence], n_folds: int,
                fold: int) -> Tuple[List[TaggedSentence], List[TaggedSentence]]:
    """
    Split sentences into training and held-out data for one fold.

    Sentence i belongs to fold i mod n_folds.

    Args:
        sentences: All tagged sentences
        n_folds: Number of folds (at least 2)
        fold: The held-out fold

    Returns:
        Tuple of (training sentences, held-out sentences)
    """
    if n_folds < 2:
        raise ValueError("Data should be split in at least 2 folds")
    if not 0 <= fold < n_folds:
        raise ValueError(f"Fold {fold} out of range for {n_folds} folds")

    train, held_out = [], []
    for idx, sent in enumerate(sentences):
        if idx % n_folds == fold:
            held_out.append(sent)
        else:
            train.append(sent)

    return train, held_out
