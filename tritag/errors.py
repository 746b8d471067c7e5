"""
Tagger Errors

Conditions that signal an inconsistent model/vocabulary pairing or a broken
configuration. They are never recovered from inside the tagger.
"""


class TaggerError(Exception):
    """Base class for tagging errors."""


class UnknownTagError(TaggerError, KeyError):
    """A tag is absent from the model's unigram table or tag numberer."""

    def __init__(self, tag):
        super().__init__(tag)
        self.tag = tag

    def __str__(self):
        return f"Unknown tag: {self.tag!r}"


class EmptyEmissionError(TaggerError):
    """The emission estimator returned no candidate tags for a token."""

    def __init__(self, word: str):
        super().__init__(word)
        self.word = word

    def __str__(self):
        return f"No tag probabilities for: {self.word!r}"


class DecodingError(TaggerError):
    """Beam pruning eliminated every path through the trellis."""
