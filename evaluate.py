#!/usr/bin/env python3
"""
Cross-Validation Script

Evaluate the tagger with k-fold cross-validation on a CoNLL-X file or the
Brown corpus.

Usage:
    python evaluate.py tagger.toml --conllx data.conll --folds 10
    python evaluate.py tagger.toml --categories news
"""

import argparse
import sys

from tritag.config import parse_config
from tritag.errors import TaggerError
from tritag.training import cross_validate_cli, fail, load_corpus_cli, setup_logging


def main():
    parser = argparse.ArgumentParser(description="Cross-validate a trigram HMM tagger")
    parser.add_argument('config', help='Tagger configuration (TOML)')
    parser.add_argument('--conllx', default=None,
                        help='CoNLL-X data (default: the Brown corpus)')
    parser.add_argument('-c', '--categories', nargs='+', default=None,
                        help='Brown corpus categories to use (default: all)')
    parser.add_argument('--tagset', default='universal', choices=['universal', 'brown'],
                        help='Brown corpus tagset (default: universal)')
    parser.add_argument('-k', '--folds', type=int, default=10,
                        help='Number of cross-validation folds (default: 10)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logging')

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.folds < 2:
        print("Data should be split in at least 2 folds.", file=sys.stderr)
        return 1

    try:
        config = parse_config(args.config)
        sentences = load_corpus_cli(
            args.conllx, args.categories,
            None if args.tagset == 'brown' else args.tagset
        )
        cross_validate_cli(sentences, config, args.folds)
    except (TaggerError, ValueError, OSError) as e:
        return fail("Evaluation failed", e)

    return 0


if __name__ == '__main__':
    sys.exit(main())
