"""
Configuration for the tagger.

A configuration is a TOML file such as:

    model = "brown.model"
    unknown_handler = "lookup"
    substitutions = "substitutions.tsv"
    beam_factor = 1000.0

    [suffix]
    max_suffix_len = 2
    lower_max_freq = 8

Relative paths are resolved against the directory of the configuration file.
"""

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Union

from .model import Model
from .smoothing import LinearInterpolationModel
from .suffix import SuffixHandlerConfig, UnknownHandler, get_unknown_handler
from .tagger import HMMTagger
from .words import Lexicon, SubstLexicon, Substitution, WordHandler


logger = logging.getLogger(__name__)


@dataclass
class TaggerConfig:
    """Configuration for the HMM tagger."""
    model: str = "model.pkl"  # Path of the trained model
    unknown_handler: str = "lookup"  # 'tree' or 'lookup'
    substitutions: Optional[str] = None  # Optional file with pattern<TAB>replacement lines
    beam_factor: float = 1000.0
    suffix: SuffixHandlerConfig = field(default_factory=SuffixHandlerConfig)

    def unknown_handler_method(self) -> UnknownHandler:
        try:
            return UnknownHandler(self.unknown_handler)
        except ValueError:
            raise ValueError(f"Unknown word handler: {self.unknown_handler}") from None


def _rel_to_config(config_path: Path, file_path: Optional[str]) -> Optional[str]:
    if not file_path or Path(file_path).is_absolute():
        return file_path
    return str(config_path.parent / file_path)


_VALUE_TYPES = {
    'model': str,
    'unknown_handler': str,
    'substitutions': str,
    'beam_factor': (int, float),
}


def _check_type(key: str, value, types) -> None:
    # bool is an int subclass, but never a valid number here
    if isinstance(value, bool) or not isinstance(value, types):
        raise ValueError(f"Invalid value for configuration key {key}: {value!r}")


def parse_config(path: Union[str, Path]) -> TaggerConfig:
    """
    Read a TOML configuration file.

    Raises:
        ValueError: for unknown keys, invalid values or malformed TOML
    """
    path = Path(path)
    with open(path, 'rb') as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Cannot parse configuration file {path}: {e}") from e

    suffix_data = data.pop('suffix', {})
    if not isinstance(suffix_data, dict):
        raise ValueError(f"Configuration key suffix must be a table, got {suffix_data!r}")

    known = {f.name for f in fields(TaggerConfig)} - {'suffix'}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    suffix_known = {f.name for f in fields(SuffixHandlerConfig)}
    unknown = set(suffix_data) - suffix_known
    if unknown:
        raise ValueError(f"Unknown suffix configuration keys: {', '.join(sorted(unknown))}")

    for key, value in data.items():
        _check_type(key, value, _VALUE_TYPES[key])
    for key, value in suffix_data.items():
        _check_type(f"suffix.{key}", value, int)

    config = TaggerConfig(**data, suffix=SuffixHandlerConfig(**suffix_data))
    config.model = _rel_to_config(path, config.model)
    config.substitutions = _rel_to_config(path, config.substitutions)

    validate_config(config)
    return config


def validate_config(config: TaggerConfig) -> None:
    """Reject configurations that cannot be used to tag."""
    config.unknown_handler_method()
    if config.beam_factor <= 0:
        raise ValueError(f"Beam factor must be positive, got {config.beam_factor}")
    if config.suffix.max_suffix_len < 0 or config.suffix.max_tags < 1:
        raise ValueError("Suffix length must be non-negative and max_tags at least 1")


def load_substitutions(path: Optional[Union[str, Path]]) -> List[Substitution]:
    """
    Read substitution rules, one `pattern<TAB>replacement` per line.

    Patterns and replacements use Python regular expression syntax.

    Raises:
        ValueError: if a line does not have exactly two fields
    """
    substitutions = []
    if not path:
        return substitutions

    with open(path, encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue

            parts = line.split('\t')
            if len(parts) != 2:
                raise ValueError(f"Incorrect substitution: {line}")

            try:
                substitutions.append(Substitution.compile(parts[0], parts[1]))
            except ValueError as e:
                raise ValueError(f"Incorrect substitution: {line} ({e})") from e

    return substitutions


def build_word_handler(config: TaggerConfig, model: Model,
                       substitutions: Optional[List[Substitution]] = None) -> WordHandler:
    """Build the lexicon with the configured unknown word handler as fallback."""
    unknown = get_unknown_handler(config.unknown_handler_method(), model, config.suffix)

    if substitutions is None:
        substitutions = load_substitutions(config.substitutions)

    if not substitutions:
        return Lexicon(model.word_tag_freqs, model.unigram_freqs, fallback=unknown)

    logger.debug("Using %d substitution rules", len(substitutions))
    lexicon = Lexicon(model.word_tag_freqs, model.unigram_freqs)
    return SubstLexicon(lexicon, substitutions, fallback=unknown)


def build_tagger(config: TaggerConfig, model: Model,
                 substitutions: Optional[List[Substitution]] = None) -> HMMTagger:
    """Assemble a tagger from a model according to the configuration."""
    validate_config(config)
    word_handler = build_word_handler(config, model, substitutions)
    trigram_model = LinearInterpolationModel(model)
    return HMMTagger(model, word_handler, trigram_model, config.beam_factor)
