import pytest

from tritag import TagNumberer, Model, Tag, train_model
from tritag.corpus import START_TOKEN, END_TOKEN


TOY_SENTENCES = [
    [("the", "DET"), ("dog", "NOUN"), ("runs", "VERB")],
    [("the", "DET"), ("runs", "NOUN"), ("end", "VERB")],
    [("a", "DET"), ("dog", "NOUN"), ("barks", "VERB"), ("loudly", "ADV")],
    [("The", "DET"), ("cat", "NOUN"), ("sleeps", "VERB"), (".", "PUNCT")],
    [("dogs", "NOUN"), ("run", "VERB"), ("fast", "ADV"), (".", "PUNCT")],
    [("fast", "ADJ"), ("cats", "NOUN"), ("run", "VERB"), (".", "PUNCT")],
    [("the", "DET"), ("run", "NOUN"), ("ends", "VERB"), ("quickly", "ADV")],
    [("Rex", "NOUN"), ("walked", "VERB"), ("12", "NUM"), ("well-known", "ADJ"), ("miles", "NOUN")],
]


@pytest.fixture
def toy_sentences():
    return [list(sent) for sent in TOY_SENTENCES]


@pytest.fixture
def toy_model(toy_sentences):
    return train_model(toy_sentences)


@pytest.fixture
def suffix_model():
    """Hand-built tables: N and V with a few lowercase words ending in 's'."""
    numberer = TagNumberer([START_TOKEN, END_TOKEN, "N", "V"])
    start, end, n, v = (Tag(i) for i in range(4))
    word_tag_freqs = {
        START_TOKEN: {start: 2},
        END_TOKEN: {end: 1},
        "cats": {n: 1},
        "runs": {v: 1},
        "dogs": {n: 2},
    }
    unigram_freqs = {start: 2, end: 1, n: 3, v: 1}
    bigram_freqs = {(start, start): 1, (start, n): 1, (n, v): 1, (v, end): 1}
    trigram_freqs = {(start, start, n): 1, (start, n, v): 1, (n, v, end): 1}
    return Model(numberer, word_tag_freqs, unigram_freqs, bigram_freqs, trigram_freqs)
