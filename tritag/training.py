"""
Training, Tagging and Evaluation with Rich Terminal UI

This module provides the command-line functionality with terminal
progress bars and status displays using the Rich library.
"""

import logging
from typing import Dict, IO, List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn
)
from rich.table import Table

from .config import TaggerConfig, build_tagger
from .corpus import (
    TaggedSentence, load_brown_tagged, load_conllx_tagged,
    read_conllx, read_plain, write_conllx
)
from .evaluation import Evaluator, cross_validate
from .model import FrequencyCollector, Model
from .smoothing import LinearInterpolationModel
from .tagger import HMMTagger


console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


STAT_LABELS = {
    'lambda_1': "λ1 (unigram)",
    'lambda_2': "λ2 (bigram)",
    'lambda_3': "λ3 (trigram)",
    'corpus_size': "Corpus size (incl. markers)",
}


def _format_stat(key: str, value) -> str:
    if isinstance(value, float):
        if key.endswith('accuracy'):
            return f"{value:.2%}"
        return f"{value:.4f}"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, (list, tuple)):
        return ", ".join(map(str, value)) if len(value) <= 5 else f"{len(value)} entries"
    return str(value)


def create_stats_table(stats: Dict) -> Table:
    """Two-column table of model or evaluation statistics."""
    table = Table(box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Statistic", style="green")
    table.add_column("Value", style="yellow", justify="right")

    for key, value in stats.items():
        label = STAT_LABELS.get(key, key.replace('_', ' ').capitalize())
        table.add_row(label, _format_stat(key, value))

    return table


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console
    )


def load_corpus_cli(conllx: Optional[str] = None,
                    categories: Optional[List[str]] = None,
                    tagset: Optional[str] = 'universal') -> List[TaggedSentence]:
    """Load a CoNLL-X file, or the Brown corpus when no file is given."""
    description = f"Loading {conllx}..." if conllx else "Loading Brown corpus..."
    with console.status(f"[cyan]{description}"):
        if conllx:
            sentences, stats = load_conllx_tagged(conllx)
        else:
            sentences, stats = load_brown_tagged(categories=categories, tagset=tagset)

    console.print(f"[green]✓[/green] Loaded {stats['num_sentences']:,} sentences "
                  f"({stats['total_tokens']:,} tokens)")
    return sentences


def train_model_cli(
    conllx: Optional[str] = None,
    categories: Optional[List[str]] = None,
    tagset: Optional[str] = 'universal',
    save_path: Optional[str] = None
) -> Model:
    """
    Train a tagger model with terminal output.

    Args:
        conllx: CoNLL-X training file (default: the Brown corpus)
        categories: Brown corpus categories to use
        tagset: Brown tagset ('universal' or None for the original tags)
        save_path: Path to save the trained model

    Returns:
        Trained Model
    """
    console.print()
    console.print(Panel.fit(
        "[bold blue]Trigram HMM Tagger Training[/bold blue]",
        border_style="blue"
    ))
    console.print()

    config_table = Table(box=box.SIMPLE, show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Corpus", conllx or "Brown")
    if not conllx:
        config_table.add_row("Categories", ", ".join(categories) if categories else "All")
        config_table.add_row("Tagset", tagset or "brown")
    console.print(Panel(config_table, title="[bold]Configuration[/bold]", border_style="green"))
    console.print()

    sentences = load_corpus_cli(conllx, categories, tagset)

    collector = FrequencyCollector()
    with _progress() as progress:
        task = progress.add_task("[cyan]Collecting frequencies...", total=len(sentences))
        collector.process_all(
            sentences,
            progress_callback=lambda current: progress.update(task, completed=current)
        )
        progress.update(task, completed=len(sentences))

    model = collector.model()
    stats = model.summary()

    smoothing = LinearInterpolationModel(model).parameters
    stats.update({'lambda_1': smoothing.l1, 'lambda_2': smoothing.l2, 'lambda_3': smoothing.l3})

    console.print("[green]✓[/green] Training complete!")
    console.print()
    console.print(Panel(
        create_stats_table(stats),
        title="[bold]Model Statistics[/bold]",
        border_style="yellow"
    ))

    if save_path:
        with console.status("[cyan]Saving model..."):
            model.save(save_path)
        console.print(f"[green]✓[/green] Model saved to: [bold]{save_path}[/bold]")

    console.print()
    return model


def load_tagger_cli(config: TaggerConfig, model: Optional[Model] = None) -> HMMTagger:
    """Load the configured model (unless given) and build a tagger."""
    if model is None:
        with console.status(f"[cyan]Loading model from {config.model}..."):
            model = Model.load(config.model)
        console.print(f"[green]✓[/green] Model loaded from: [bold]{config.model}[/bold]")

    with console.status(f"[cyan]Preparing {config.unknown_handler} unknown word handler..."):
        tagger = build_tagger(config, model)
    return tagger


def tag_file_cli(tagger: HMMTagger, source: IO[str], target: IO[str],
                 input_format: str = 'conllx') -> int:
    """
    Tag sentences from `source` and write them to `target`.

    CoNLL-X input gets its POSTAG column replaced; plain input (one
    tokenized sentence per line) is written as word/TAG pairs.

    Returns:
        Number of tagged sentences
    """
    count = 0
    if input_format == 'conllx':
        for sent in read_conllx(source):
            tags, _ = tagger.tag([token.form for token in sent])
            for token, tag in zip(sent, tags):
                token.postag = tag
            write_conllx([sent], target)
            count += 1
    elif input_format == 'plain':
        for tokens in read_plain(source):
            tags, _ = tagger.tag(tokens)
            target.write(" ".join(f"{w}/{t}" for w, t in zip(tokens, tags)) + "\n")
            count += 1
    else:
        raise ValueError(f"Unknown input format: {input_format}")

    return count


def cross_validate_cli(sentences: List[TaggedSentence], config: TaggerConfig,
                       n_folds: int = 10) -> Evaluator:
    """Run k-fold cross-validation and display per-fold and overall accuracy."""
    console.print()
    console.print(Panel.fit("[bold blue]Cross-Validation[/bold blue]", border_style="blue"))
    console.print()

    table = Table(box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Fold", style="green", justify="right")
    table.add_column("Accuracy", style="yellow", justify="right")
    table.add_column("Known", justify="right")
    table.add_column("Unknown", justify="right")

    with _progress() as progress:
        task = progress.add_task("[cyan]Evaluating folds...", total=n_folds)

        def fold_done(fold: int, evaluator: Evaluator):
            table.add_row(str(fold), f"{evaluator.accuracy:.4f}",
                          f"{evaluator.known_accuracy:.4f}", f"{evaluator.unknown_accuracy:.4f}")
            progress.update(task, advance=1)

        _, overall = cross_validate(sentences, config, n_folds, fold_callback=fold_done)

    console.print(table)
    console.print(Panel(
        create_stats_table(overall.results()),
        title="[bold]Overall Results[/bold]",
        border_style="green"
    ))

    return overall


def interactive_demo(tagger: HMMTagger):
    """Run an interactive tagging demo."""
    console.print()
    console.print(Panel.fit(
        "[bold magenta]Interactive Demo[/bold magenta]\n"
        "Enter a sentence to see its tags.\n"
        "Type 'quit' to exit.",
        border_style="magenta"
    ))
    console.print()

    while True:
        try:
            user_input = console.input("[bold cyan]Enter sentence:[/bold cyan] ")

            if user_input.lower() in ('quit', 'exit', 'q'):
                break

            tokens = user_input.split()
            if not tokens:
                continue

            tags, prob = tagger.tag(tokens)

            table = Table(box=box.SIMPLE, show_header=True, header_style="bold yellow")
            table.add_column("Token")
            table.add_column("Tag", style="green")
            for token, tag in zip(tokens, tags):
                table.add_row(token, tag)

            console.print(table)
            console.print(f"[yellow]Log probability:[/yellow] {prob:.4f}")
            console.print()

        except (KeyboardInterrupt, EOFError):
            break

    console.print("\n[yellow]Goodbye![/yellow]")


def fail(message: str, error: Exception) -> int:
    """Report a fatal error and return the exit status."""
    console.print(f"[bold red]{message}:[/bold red] {error}")
    return 1
