"""
Trigram HMM Part-of-Speech Tagger

A Hidden Markov Model tagger inspired by Thorsten Brants' TnT: deleted
interpolation of tag trigrams, suffix-based estimation for unknown words
and beam-pruned Viterbi decoding.
"""

from .config import TaggerConfig, build_tagger, parse_config
from .errors import DecodingError, EmptyEmissionError, TaggerError, UnknownTagError
from .model import FrequencyCollector, Model, Tag, TagNumberer, train_model
from .smoothing import LinearInterpolationModel
from .suffix import LookupSuffixHandler, SuffixHandler, SuffixHandlerConfig, UnknownHandler
from .tagger import HMMTagger
from .words import Lexicon, SubstLexicon, Substitution

__version__ = "0.1.0"
__all__ = [
    "TaggerConfig", "build_tagger", "parse_config",
    "TaggerError", "UnknownTagError", "EmptyEmissionError", "DecodingError",
    "FrequencyCollector", "Model", "Tag", "TagNumberer", "train_model",
    "LinearInterpolationModel",
    "SuffixHandler", "LookupSuffixHandler", "SuffixHandlerConfig", "UnknownHandler",
    "HMMTagger", "Lexicon", "SubstLexicon", "Substitution",
]
