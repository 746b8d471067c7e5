#!/usr/bin/env python3
"""
Tagger Training Script

Collect the frequency tables of a trigram HMM tagger from the Brown corpus
or a CoNLL-X file.

Usage:
    python train.py --save brown.model
    python train.py --conllx train.conll --save model.pkl
    python train.py --categories news fiction --interactive
"""

import argparse
import sys

from tritag import Model, TaggerConfig
from tritag.config import parse_config
from tritag.corpus import get_brown_categories
from tritag.errors import TaggerError
from tritag.training import (
    console, fail, interactive_demo, load_tagger_cli, setup_logging, train_model_cli
)


def main():
    parser = argparse.ArgumentParser(
        description="Train a trigram HMM part-of-speech tagger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --save brown.model
  %(prog)s --categories news fiction --tagset brown --save news.model
  %(prog)s --conllx train.conll --save model.pkl
  %(prog)s --load brown.model --interactive
  %(prog)s --load brown.model --export-tags tags.txt

Brown corpus categories:
  adventure, belles_lettres, editorial, fiction, government,
  hobbies, humor, learned, lore, mystery, news, religion,
  reviews, romance, science_fiction
        """
    )

    parser.add_argument(
        '--conllx',
        type=str,
        default=None,
        help='CoNLL-X training file (default: the Brown corpus)'
    )

    parser.add_argument(
        '-c', '--categories',
        type=str,
        nargs='+',
        default=None,
        help='Brown corpus categories to use (default: all)'
    )

    parser.add_argument(
        '--tagset',
        type=str,
        default='universal',
        choices=['universal', 'brown'],
        help='Brown corpus tagset (default: universal)'
    )

    parser.add_argument(
        '--save',
        type=str,
        default=None,
        help='Path to save the trained model'
    )

    parser.add_argument(
        '--export-tags',
        type=str,
        default=None,
        help='Write the tag labels, one per line in number order'
    )

    parser.add_argument(
        '--load',
        type=str,
        default=None,
        help='Path to load a pre-trained model'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Tagger configuration (TOML) for the interactive demo'
    )

    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='Run interactive demo after training'
    )

    parser.add_argument(
        '--list-categories',
        action='store_true',
        help='List available Brown corpus categories and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show debug logging'
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.list_categories:
        print("Available Brown corpus categories:")
        for cat in get_brown_categories():
            print(f"  - {cat}")
        return 0

    try:
        if args.load:
            with console.status(f"[cyan]Loading model from {args.load}..."):
                model = Model.load(args.load)
            console.print(f"[green]✓[/green] Model loaded from: [bold]{args.load}[/bold]")
        else:
            model = train_model_cli(
                conllx=args.conllx,
                categories=args.categories,
                tagset=None if args.tagset == 'brown' else args.tagset,
                save_path=args.save
            )

        if args.export_tags:
            model.tag_numberer.write(args.export_tags)
            console.print(f"[green]✓[/green] Tags written to: [bold]{args.export_tags}[/bold]")

        if args.interactive:
            config = parse_config(args.config) if args.config else TaggerConfig()
            interactive_demo(load_tagger_cli(config, model))
    except (TaggerError, ValueError, OSError) as e:
        return fail("Training failed", e)

    return 0


if __name__ == '__main__':
    sys.exit(main())
