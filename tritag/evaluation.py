"""
Tagger Evaluation

Accuracy on held-out data, separately for known words (seen in training)
and unknown words, and k-fold cross-validation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .config import TaggerConfig, build_tagger
from .corpus import TaggedSentence, split_folds
from .model import Model, train_model
from .tagger import HMMTagger


logger = logging.getLogger(__name__)


def _accuracy(correct: int, incorrect: int) -> float:
    total = correct + incorrect
    return correct / total if total else 0.0


@dataclass
class Evaluator:
    """Counts correctly/incorrectly tagged known and unknown tokens."""
    tagger: Optional[HMMTagger] = None
    model: Optional[Model] = None
    known_correct: int = 0
    known_incorrect: int = 0
    unknown_correct: int = 0
    unknown_incorrect: int = 0

    def process(self, sentence: TaggedSentence) -> None:
        """Tag a gold sentence and count the tokens that were tagged correctly."""
        words = [form for form, _ in sentence]
        tags, _ = self.tagger.tag(words)

        lexicon = self.model.word_tag_freqs
        for (word, gold), predicted in zip(sentence, tags):
            if word in lexicon:
                if predicted == gold:
                    self.known_correct += 1
                else:
                    self.known_incorrect += 1
            elif predicted == gold:
                self.unknown_correct += 1
            else:
                self.unknown_incorrect += 1

    def merge(self, other: 'Evaluator') -> None:
        self.known_correct += other.known_correct
        self.known_incorrect += other.known_incorrect
        self.unknown_correct += other.unknown_correct
        self.unknown_incorrect += other.unknown_incorrect

    @property
    def correct(self) -> int:
        return self.known_correct + self.unknown_correct

    @property
    def incorrect(self) -> int:
        return self.known_incorrect + self.unknown_incorrect

    @property
    def accuracy(self) -> float:
        return _accuracy(self.correct, self.incorrect)

    @property
    def known_accuracy(self) -> float:
        return _accuracy(self.known_correct, self.known_incorrect)

    @property
    def unknown_accuracy(self) -> float:
        return _accuracy(self.unknown_correct, self.unknown_incorrect)

    def results(self) -> dict:
        return {
            'accuracy': self.accuracy,
            'known_accuracy': self.known_accuracy,
            'unknown_accuracy': self.unknown_accuracy,
            'tokens': self.correct + self.incorrect,
            'unknown_tokens': self.unknown_correct + self.unknown_incorrect,
        }


def evaluate(tagger: HMMTagger, model: Model, sentences: List[TaggedSentence]) -> Evaluator:
    evaluator = Evaluator(tagger, model)
    for sent in sentences:
        evaluator.process(sent)
    return evaluator


def cross_validate(sentences: List[TaggedSentence], config: TaggerConfig,
                   n_folds: int = 10,
                   fold_callback: Optional[Callable[[int, Evaluator], None]] = None
                   ) -> Tuple[List[Evaluator], Evaluator]:
    """
    Evaluate the tagger with k-fold cross-validation.

    Args:
        sentences: Gold tagged sentences
        config: Tagger configuration (the model path is ignored)
        n_folds: Number of folds
        fold_callback: Optional callback(fold, evaluator) after each fold

    Returns:
        Tuple of (per-fold evaluators, overall evaluator)
    """
    folds = []
    overall = Evaluator()

    for fold in range(n_folds):
        train, held_out = split_folds(sentences, n_folds, fold)
        model = train_model(train)
        tagger = build_tagger(config, model)

        evaluator = evaluate(tagger, model, held_out)
        logger.info("Fold %d accuracy: %.4f (known: %.4f, unknown: %.4f)", fold,
                    evaluator.accuracy, evaluator.known_accuracy, evaluator.unknown_accuracy)

        folds.append(evaluator)
        overall.merge(evaluator)
        if fold_callback:
            fold_callback(fold, evaluator)

    return folds, overall
