import pytest

from tritag import FrequencyCollector, Model, Tag, TagNumberer, UnknownTagError
from tritag.corpus import START_TOKEN, END_TOKEN


def test_corpus_size_counts_markers(toy_sentences, toy_model):
    tokens = sum(len(sent) for sent in toy_sentences)
    assert toy_model.corpus_size() == tokens + 3 * len(toy_sentences)


def test_marker_counts(toy_sentences, toy_model):
    numberer = toy_model.tag_numberer
    start = Tag(numberer.index(START_TOKEN), False)
    end = Tag(numberer.index(END_TOKEN), False)

    assert toy_model.unigram_freqs[start] == 2 * len(toy_sentences)
    assert toy_model.unigram_freqs[end] == len(toy_sentences)
    assert toy_model.bigram_freqs[(start, start)] == len(toy_sentences)


def test_capitalization_is_part_of_the_tag(toy_model):
    det = toy_model.tag_numberer.index("DET")

    assert toy_model.word_tag_freqs["The"] == {Tag(det, True): 1}
    assert toy_model.word_tag_freqs["the"] == {Tag(det, False): 3}


def test_ambiguous_word_counts(toy_model):
    numberer = toy_model.tag_numberer
    noun, verb = numberer.index("NOUN"), numberer.index("VERB")

    assert toy_model.word_tag_freqs["runs"] == {Tag(verb): 1, Tag(noun): 1}
    assert toy_model.word_tag_freqs["run"] == {Tag(verb): 2, Tag(noun): 1}


def test_trigram_counts():
    collector = FrequencyCollector()
    collector.process([("a", "X"), ("b", "Y")])
    collector.process([("c", "X"), ("d", "Y")])
    model = collector.model()

    x, y = Tag(model.tag_numberer.index("X")), Tag(model.tag_numberer.index("Y"))
    start = Tag(model.tag_numberer.index(START_TOKEN))
    end = Tag(model.tag_numberer.index(END_TOKEN))

    assert model.trigram_freqs == {
        (start, start, x): 2,
        (start, x, y): 2,
        (x, y, end): 2,
    }
    assert str(model) == "6 words, 4 unigrams, 4 bigrams, 3 trigrams"


def test_empty_form_is_rejected():
    collector = FrequencyCollector()
    with pytest.raises(ValueError):
        collector.process([("", "X")])


def test_numberer_is_a_bijection(tmp_path):
    numberer = TagNumberer()
    assert numberer.number("NOUN") == 0
    assert numberer.number("VERB") == 1
    assert numberer.number("NOUN") == 0
    assert numberer.label(1) == "VERB"
    assert len(numberer) == 2
    assert "VERB" in numberer

    with pytest.raises(UnknownTagError):
        numberer.index("ADJ")

    path = tmp_path / "tags.txt"
    numberer.write(path)
    assert path.read_text(encoding='utf-8').splitlines() == ["NOUN", "VERB"]


def test_save_and_load(toy_model, tmp_path):
    path = tmp_path / "toy.model"
    toy_model.save(path)
    loaded = Model.load(path)

    assert loaded.tag_numberer.labels == toy_model.tag_numberer.labels
    assert loaded.word_tag_freqs == toy_model.word_tag_freqs
    assert loaded.trigram_freqs == toy_model.trigram_freqs
    assert loaded.summary() == toy_model.summary()
