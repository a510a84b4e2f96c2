"""Command-line interface for text-svm.

Provides ``classify``, ``vectorize``, and ``info`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. The bundle
path can come from ``--bundle`` or the ``TEXT_SVM_BUNDLE`` environment
variable (a ``.env`` file is honored).

Usage::

    text-svm classify --bundle news.zip "央行宣布降息"
    text-svm vectorize --bundle news.zip --file article.txt
    text-svm info --bundle news.zip
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .archive import MemoryArchive
from .classifier import libsvm_from_archive
from .corpus import Corpus

console = Console()

BUNDLE_ENVVAR = "TEXT_SVM_BUNDLE"

bundle_option = click.option(
    "--bundle", "-b",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar=BUNDLE_ENVVAR, required=True,
    help=f"Corpus bundle (zip). Defaults to ${BUNDLE_ENVVAR}.",
)
output_option = click.option(
    "--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
    help="Output format.",
)
file_option = click.option(
    "--file", "-f", "text_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None, help="Read the text from a file instead of the argument.",
)


def _read_text(text: str | None, text_file: Path | None) -> str:
    if text_file is not None:
        return text_file.read_text(encoding="utf-8", errors="replace")
    if text is None:
        raise click.UsageError("Provide TEXT or --file.")
    return text


def _fail(e: Exception) -> None:
    console.print(f"[bold red]Error:[/] {escape(str(e))}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="text-svm")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """TF-IDF text classification against a fixed corpus and SVM model."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@bundle_option
@click.argument("text", required=False)
@file_option
@output_option
def classify(bundle: Path, text: str | None, text_file: Path | None, output: str) -> None:
    """Predict the class of a text.

    Example: text-svm classify --bundle news.zip "央行宣布降息"
    """
    content = _read_text(text, text_file)

    with console.status("[bold blue]Loading bundle...", spinner="dots"):
        try:
            classifier = libsvm_from_archive(bundle)
        except Exception as e:
            _fail(e)

    result = classifier.explain(content)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    label = escape(result.label) if result.label else "[dim](unclassified)[/]"
    console.print(Panel(
        f"[bold]{label}[/]\n"
        f"Index: {result.label_index} | Score: {result.score:g} | "
        f"Features: {len(result.vector)}",
        title="Classification",
        border_style="blue",
    ))


@main.command()
@bundle_option
@click.argument("text", required=False)
@file_option
@output_option
def vectorize(bundle: Path, text: str | None, text_file: Path | None, output: str) -> None:
    """Show the TF-IDF vector of a text.

    Example: text-svm vectorize --bundle news.zip --file article.txt
    """
    content = _read_text(text, text_file)
    corpus = _load_corpus(bundle)
    vector = corpus.vector(content)

    if output == "json":
        click.echo(json.dumps({str(k): v for k, v in sorted(vector.items())}, indent=2))
        return

    if not vector:
        console.print("[dim]No vocabulary terms found.[/]")
        return

    counts = corpus.term_counts(content)
    table = Table(title="TF-IDF Vector", show_lines=False)
    table.add_column("Index", justify="right", width=7)
    table.add_column("Feature", style="cyan")
    table.add_column("Count", justify="right", width=7)
    table.add_column("IDF", justify="right", width=9)
    table.add_column("Weight", justify="right", width=9)

    for index, weight in sorted(vector.items(), key=lambda x: x[1], reverse=True):
        table.add_row(
            str(index),
            corpus.feature(index),
            str(counts[index]),
            f"{corpus.idf[index]:.4f}",
            f"{weight:.4f}",
        )

    console.print(table)


@main.command()
@bundle_option
@output_option
def info(bundle: Path, output: str) -> None:
    """Summarize the corpus in a bundle.

    Example: text-svm info --bundle news.zip
    """
    corpus = _load_corpus(bundle)
    idf_values = list(corpus.idf.values())
    summary = {
        "bundle": str(bundle),
        "classes": list(corpus.classes),
        "num_features": corpus.num_features,
        "num_documents": corpus.num_documents,
        "idf_min": min(idf_values) if idf_values else None,
        "idf_max": max(idf_values) if idf_values else None,
    }

    if output == "json":
        click.echo(json.dumps(summary, ensure_ascii=False, indent=2))
        return

    console.print(Panel(
        f"[bold]{bundle.name}[/]\n"
        f"Classes: {corpus.num_classes} | "
        f"Features: {corpus.num_features} | "
        f"Training records: {corpus.num_documents}",
        title="Corpus",
        border_style="blue",
    ))

    table = Table(title="Classes", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Name", style="cyan")
    for i, name in enumerate(corpus.classes, 1):
        table.add_row(str(i), name)
    console.print(table)

    if idf_values:
        console.print(f"IDF range: {summary['idf_min']:.4f} .. {summary['idf_max']:.4f}")


def _load_corpus(bundle: Path) -> Corpus:
    with console.status("[bold blue]Loading corpus...", spinner="dots"):
        try:
            return Corpus.from_archive(MemoryArchive.open(bundle))
        except Exception as e:
            _fail(e)


if __name__ == "__main__":
    main()
