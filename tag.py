#!/usr/bin/env python3
"""
Tagging Script

Tag CoNLL-X or plain text input with a trained model.

Usage:
    python tag.py tagger.toml input.conll output.conll
    python tag.py tagger.toml --format plain < sentences.txt
"""

import argparse
import sys

from tritag.config import parse_config
from tritag.errors import TaggerError
from tritag.training import console, fail, load_tagger_cli, setup_logging, tag_file_cli


def main():
    parser = argparse.ArgumentParser(description="Tag sentences with a trigram HMM tagger")
    parser.add_argument('config', help='Tagger configuration (TOML)')
    parser.add_argument('input', nargs='?', default=None, help='Input file (default: stdin)')
    parser.add_argument('output', nargs='?', default=None, help='Output file (default: stdout)')
    parser.add_argument(
        '-f', '--format',
        default='conllx',
        choices=['conllx', 'plain'],
        help='Input format: CoNLL-X or one tokenized sentence per line (default: conllx)'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logging')

    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        config = parse_config(args.config)
        tagger = load_tagger_cli(config)

        source = open(args.input, encoding='utf-8') if args.input else sys.stdin
        target = open(args.output, 'w', encoding='utf-8') if args.output else sys.stdout
        try:
            count = tag_file_cli(tagger, source, target, args.format)
        finally:
            if source is not sys.stdin:
                source.close()
            if target is not sys.stdout:
                target.close()
    except (TaggerError, ValueError, OSError) as e:
        return fail("Tagging failed", e)

    console.print(f"[green]✓[/green] Tagged {count:,} sentences")
    return 0


if __name__ == '__main__':
    sys.exit(main())
