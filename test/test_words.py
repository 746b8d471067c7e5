import math

from tritag import Lexicon, SubstLexicon, Substitution, Tag
from tritag.words import WordHandler


A, B = Tag(0), Tag(1)


class RecordingHandler(WordHandler):
    def __init__(self):
        self.words = []

    def tag_probs(self, word):
        self.words.append(word)
        return {B: -1.0}


def test_emission_probabilities():
    lexicon = Lexicon({"w": {A: 3, B: 1}}, {A: 30, B: 10})
    probs = lexicon.tag_probs("w")

    assert probs[A] == math.log(3 / 30)
    assert probs[B] == math.log(1 / 10)


def test_only_observed_tags():
    lexicon = Lexicon({"w": {A: 3}, "v": {B: 1}}, {A: 30, B: 10})
    assert set(lexicon.tag_probs("w")) == {A}


def test_capitalized_word_falls_back_to_lowercase():
    lexicon = Lexicon({"dog": {A: 2}}, {A: 4})

    assert lexicon.tag_probs("Dog") == {A: math.log(0.5)}
    assert "Dog" not in lexicon
    assert lexicon.tag_probs("dOG") == {}


def test_unknown_word_without_fallback():
    lexicon = Lexicon({"dog": {A: 2}}, {A: 4})
    assert lexicon.tag_probs("cat") == {}


def test_unknown_word_uses_fallback():
    fallback = RecordingHandler()
    lexicon = Lexicon({"dog": {A: 2}}, {A: 4}, fallback=fallback)

    assert lexicon.tag_probs("dog") == {A: math.log(0.5)}
    assert lexicon.tag_probs("cat") == {B: -1.0}
    assert fallback.words == ["cat"]


def test_substitutions_are_applied_in_order():
    lexicon = Lexicon({"<num>": {A: 1}, "year": {B: 1}}, {A: 2, B: 2})
    handler = SubstLexicon(lexicon, [
        Substitution.compile(r"^[0-9]+$", "<num>"),
        Substitution.compile(r"^<num>s$", "year"),
    ])

    assert handler.tag_probs("1984") == {A: math.log(0.5)}
    assert handler.tag_probs("year") == {B: math.log(0.5)}
    assert handler.tag_probs("foo") == {}


def test_substitution_fallback_gets_original_word():
    fallback = RecordingHandler()
    lexicon = Lexicon({"<num>": {A: 1}}, {A: 2})
    handler = SubstLexicon(lexicon, [Substitution.compile(r"[0-9]", "x")], fallback=fallback)

    assert handler.tag_probs("a1") == {B: -1.0}
    assert fallback.words == ["a1"]
