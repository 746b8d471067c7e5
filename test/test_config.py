import pytest

from tritag import SubstLexicon, TaggerConfig, Lexicon, parse_config, build_tagger
from tritag.config import build_word_handler, load_substitutions
from tritag.suffix import LookupSuffixHandler, SuffixHandler, UnknownHandler


def test_defaults():
    config = TaggerConfig()
    assert config.unknown_handler_method() == UnknownHandler.LOOKUP
    assert config.beam_factor == 1000.0
    assert config.suffix.max_suffix_len == 2


def test_parse_config(tmp_path):
    path = tmp_path / "tagger.toml"
    path.write_text(
        'model = "brown.model"\n'
        'unknown_handler = "tree"\n'
        'substitutions = "subst.tsv"\n'
        'beam_factor = 500.0\n'
        '\n'
        '[suffix]\n'
        'max_suffix_len = 4\n'
        'lower_max_freq = 10\n'
    )

    config = parse_config(path)

    assert config.model == str(tmp_path / "brown.model")
    assert config.substitutions == str(tmp_path / "subst.tsv")
    assert config.unknown_handler_method() == UnknownHandler.TREE
    assert config.beam_factor == 500.0
    assert config.suffix.max_suffix_len == 4
    assert config.suffix.lower_max_freq == 10
    assert config.suffix.upper_max_freq == 2


@pytest.mark.parametrize("text", [
    'modle = "typo.model"\n',
    '[suffix]\nmax_length = 3\n',
    'unknown_handler = "hash"\n',
    'beam_factor = 0.0\n',
    'model = \n',
    'beam_factor = "wide"\n',
    'beam_factor = true\n',
    'model = 3\n',
    'suffix = 3\n',
    '[suffix]\nmax_tags = "ten"\n',
])
def test_invalid_config(tmp_path, text):
    path = tmp_path / "tagger.toml"
    path.write_text(text)

    with pytest.raises(ValueError):
        parse_config(path)


def test_load_substitutions(tmp_path):
    path = tmp_path / "subst.tsv"
    path.write_text("^[0-9]+$\t<num>\n\n(.)\\1\t\\1\n")

    substitutions = load_substitutions(path)

    assert len(substitutions) == 2
    assert substitutions[0].apply("1984") == "<num>"
    assert substitutions[1].apply("bookkeeper") == "bokeper"


def test_incorrect_substitution(tmp_path):
    path = tmp_path / "subst.tsv"
    path.write_text("only-a-pattern\n")

    with pytest.raises(ValueError, match="Incorrect substitution"):
        load_substitutions(path)

    path.write_text("([a-z]\tx\n")
    with pytest.raises(ValueError, match="Incorrect substitution"):
        load_substitutions(path)


def test_build_word_handler(toy_model, tmp_path):
    handler = build_word_handler(TaggerConfig(unknown_handler="tree"), toy_model)
    assert isinstance(handler, Lexicon)
    assert isinstance(handler.fallback, SuffixHandler)

    path = tmp_path / "subst.tsv"
    path.write_text("^[0-9]+$\t12\n")
    handler = build_word_handler(TaggerConfig(substitutions=str(path)), toy_model)
    assert isinstance(handler, SubstLexicon)
    assert isinstance(handler.fallback, LookupSuffixHandler)
    assert handler.tag_probs("1984") == handler.tag_probs("12")


def test_build_tagger(toy_model):
    tagger = build_tagger(TaggerConfig(beam_factor=50.0), toy_model)
    assert tagger.beam_factor == 50.0
    assert len(tagger.tag(["the", "dog", "runs"])[0]) == 3
