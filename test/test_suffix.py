import math

import pytest

from tritag import LookupSuffixHandler, SuffixHandler, SuffixHandlerConfig, Tag
from tritag.suffix import (
    UnknownHandler, WordClass, calculate_theta, get_unknown_handler, word_class,
)


N, V = Tag(2), Tag(3)


@pytest.mark.parametrize("word, cls", [
    ("Paris", WordClass.UPPER),
    ("1984", WordClass.CARDINAL),
    ("3rd", WordClass.CARDINAL),
    ("1.5", WordClass.CARDINAL),
    ("well-known", WordClass.DASH),
    ("dogs", WordClass.LOWER),
])
def test_word_class(word, cls):
    assert word_class(word) == cls


def test_theta_ignores_markers(suffix_model):
    theta = calculate_theta(suffix_model.unigram_freqs, {0, 1})
    # P(N) = 0.75, P(V) = 0.25, averaged over all four unigrams.
    assert theta == pytest.approx(math.sqrt(0.25 / 3))


def test_theta_of_a_single_tag():
    assert calculate_theta({Tag(0): 5}, set()) == 0.0


def test_smoothed_suffix_distribution(suffix_model):
    handler = SuffixHandler(SuffixHandlerConfig(), suffix_model)
    theta = handler.theta

    # root: N 3/4, V 1/4; 's': N 3/4, V 1/4; 'st' (from "cats"): N 1/1
    p_n = 0.75 / (theta + 1)
    p_v = 0.25 / (theta + 1)
    p_n = (0.75 + theta * p_n) / (theta + 1)
    p_v = (0.25 + theta * p_v) / (theta + 1)
    p_n = (1.0 + theta * p_n) / (theta + 1)
    p_v = (0.0 + theta * p_v) / (theta + 1)

    probs = handler.tag_probs("bats")
    assert probs[N] == pytest.approx(math.log(p_n / 3))
    assert probs[V] == pytest.approx(math.log(p_v / 1))
    assert set(probs) == {N, V}


def test_same_suffix_same_distribution(suffix_model):
    handler = SuffixHandler(SuffixHandlerConfig(), suffix_model)
    assert handler.tag_probs("bats") == handler.tag_probs("cats")
    assert handler.tag_probs("hogs") == handler.tag_probs("dogs")
    assert handler.tag_probs("bats") != handler.tag_probs("buns")


def test_unseen_suffix_uses_shorter_suffix(suffix_model):
    handler = SuffixHandler(SuffixHandlerConfig(), suffix_model)
    # Only the suffix "s" is known for "xs" and "zs".
    assert handler.tag_probs("xs") == handler.tag_probs("zs")

    # The inverted root distribution is flat.
    root_only = handler.tag_probs("xyz")
    assert root_only[N] == pytest.approx(root_only[V])


def test_frequency_ceiling(suffix_model):
    config = SuffixHandlerConfig(lower_max_freq=1)
    handler = SuffixHandler(config, suffix_model)

    # "dogs" occurs twice and does not contribute to the tree.
    assert 'g' not in handler.trees[WordClass.LOWER].root.children['s'].children
    assert handler.tag_probs("hogs") == handler.tag_probs("xs")


def test_capitalized_words_use_their_own_tree(suffix_model):
    handler = SuffixHandler(SuffixHandlerConfig(), suffix_model)
    assert not handler.trees[WordClass.UPPER].root.children
    assert handler.tag_probs("Cats") == handler.tag_probs("Xyz")


def test_max_tags(toy_model):
    handler = SuffixHandler(SuffixHandlerConfig(max_tags=2), toy_model)
    probs = handler.tag_probs("jumps")

    assert len(probs) == 2
    full = SuffixHandler(SuffixHandlerConfig(max_tags=100), toy_model).tag_probs("jumps")
    assert sorted(probs.values()) == sorted(full.values())[-2:]


@pytest.mark.parametrize("word", [
    "dogs", "jumps", "quickly", "runs", "the", "x",
    "Fido", "Rex", "1999", "12", "well-done", "",
])
def test_lookup_matches_tree(toy_model, word):
    config = SuffixHandlerConfig(max_suffix_len=3)
    tree = SuffixHandler(config, toy_model)
    lookup = LookupSuffixHandler(tree)

    expected = tree.tag_probs(word)
    actual = lookup.tag_probs(word)
    assert actual.keys() == expected.keys()
    for tag, prob in expected.items():
        assert actual[tag] == pytest.approx(prob)


def test_get_unknown_handler(toy_model):
    assert isinstance(get_unknown_handler(UnknownHandler.TREE, toy_model), SuffixHandler)
    assert isinstance(get_unknown_handler(UnknownHandler.LOOKUP, toy_model), LookupSuffixHandler)
