"""Command-line interface for text to flashcard conversion."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import SettingsStore, parse_card_types, parse_setting_value, resolve_settings
from .exceptions import FlashcardError, NoValidCardsError
from .exporter import AnkiExporter, export_cards_to_json, load_cards_from_json
from .generator.prompts import build_prompt
from .host import OutlineHost
from .models import CanonicalCard, CardType, GenerationSettings, Provider
from .parser import preprocess_text, read_document, validate_text
from .pipeline import GenerationReport, render_cards, run_generation

console = Console()


def setup_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def fail(message: str) -> NoReturn:
    """Print a single error message and exit with a non-zero status."""
    console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def safe_filename(name: str) -> str:
    """Convert a folder name to a filesystem-safe string."""
    return "".join(c if c.isalnum() or c in " -_" else "_" for c in name).strip() or "flashcards"


def load_source_text(source: Optional[str], text: Optional[str]) -> str:
    """Get input text from --text, stdin ('-') or a document path."""
    if text is not None:
        return text
    if source is None:
        raise click.UsageError("Provide a SOURCE file, '-' for stdin, or --text")
    if source == "-":
        return click.get_text_stream("stdin").read()
    return read_document(source)


def display_cards_preview(cards: list[CanonicalCard], limit: int = 5) -> None:
    """Display a preview of cards."""
    num_shown = min(limit, len(cards))
    console.print(f"\n[bold]Sample Cards (showing {num_shown} of {len(cards)}):[/bold]\n")

    for card in cards[:limit]:
        console.print(f"[cyan]{card.type.value.upper()}[/cyan]")
        console.print(f"   {card.get_display_text()}", markup=False)
        console.print()


def write_outputs(
    report: GenerationReport,
    host: OutlineHost,
    settings: GenerationSettings,
    output: Optional[str],
    json_path: Optional[str],
    apkg_path: Optional[str],
) -> None:
    """Save the outline and any requested exports, then print the summary."""
    outline_path = Path(output) if output else Path(f"{safe_filename(settings.target_folder)}.md")
    host.write(outline_path)
    console.print(f"[green]O[/green] Outline saved to: {outline_path}")

    if json_path:
        path = export_cards_to_json(report.cards, json_path)
        console.print(f"[green]O[/green] Cards saved to: {path}")

    if apkg_path:
        exporter = AnkiExporter(settings.target_folder)
        exporter.add_cards(report.cards)
        path = exporter.export(apkg_path)
        console.print(f"[green]O[/green] Anki deck exported: {path}")

    console.print(f"\n[bold green]Created {report.created} cards[/bold green]")
    if report.skipped:
        console.print(f"[yellow]Skipped {report.skipped} cards that could not be created[/yellow]")


@click.group()
@click.option(
    "--settings-file",
    type=click.Path(dir_okay=False),
    help="Settings file (default: ~/.config/text-to-remnote/settings.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, settings_file: Optional[str], verbose: bool):
    """Text to RemNote - Generate flashcards from text using an LLM."""
    setup_logging(verbose)
    ctx.obj = SettingsStore(Path(settings_file) if settings_file else None)


@cli.command()
@click.argument("source", required=False)
@click.option("--text", "-t", type=str, help="Use this text instead of a file")
@click.option("--types", type=str, help="Card types, e.g. 'basic,cloze,list'")
@click.option("--max-cards", "-n", type=click.IntRange(min=1), help="Maximum cards to request")
@click.option("--provider", "-p", type=click.Choice([p.value for p in Provider]), help="LLM provider")
@click.option("--model", "-m", type=str, help="Model identifier")
@click.option("--api-key", type=str, help="API key (default: stored setting or environment)")
@click.option("--api-url", type=str, help="Base endpoint URL")
@click.option("--folder", "-f", type=str, help="Destination folder name")
@click.option(
    "--enforce-max-cards",
    is_flag=True,
    help="Drop cards beyond --max-cards instead of keeping everything the model returns",
)
@click.option("--output", "-o", type=click.Path(), help="Outline file (default: ./<folder>.md)")
@click.option("--json", "json_path", type=click.Path(), help="Also save the cards as JSON")
@click.option("--apkg", "apkg_path", type=click.Path(), help="Also export an Anki .apkg deck")
@click.option("--preview", is_flag=True, help="Show a preview of the generated cards")
@click.pass_obj
def generate(
    store: SettingsStore,
    source: Optional[str],
    text: Optional[str],
    types: Optional[str],
    max_cards: Optional[int],
    provider: Optional[str],
    model: Optional[str],
    api_key: Optional[str],
    api_url: Optional[str],
    folder: Optional[str],
    enforce_max_cards: bool,
    output: Optional[str],
    json_path: Optional[str],
    apkg_path: Optional[str],
    preview: bool,
):
    """Generate flashcards from SOURCE (a .txt, .md, .pdf or .epub file, or '-' for stdin)."""
    try:
        raw_text = load_source_text(source, text)
        settings = resolve_settings(
            {
                "provider": provider,
                "model": model,
                "api_key": api_key,
                "api_url": api_url,
                "max_cards": max_cards,
                "target_folder": folder,
                "enforce_max_cards": True if enforce_max_cards else None,
            },
            store,
        )
        card_types = parse_card_types(types) if types else None

        host = OutlineHost()
        with console.status(f"Generating cards with {settings.provider.value} ({settings.model})..."):
            report = asyncio.run(run_generation(raw_text, settings, host, card_types=card_types))
    except (FlashcardError, FileNotFoundError) as e:
        fail(str(e))

    if preview:
        display_cards_preview(report.cards)

    write_outputs(report, host, settings, output, json_path, apkg_path)


@cli.command()
@click.argument("source", required=False)
@click.option("--text", "-t", type=str, help="Use this text instead of a file")
@click.option("--types", type=str, help="Card types, e.g. 'basic,cloze,list'")
@click.option("--max-cards", "-n", type=click.IntRange(min=1), help="Maximum cards to request")
@click.pass_obj
def prompt(
    store: SettingsStore,
    source: Optional[str],
    text: Optional[str],
    types: Optional[str],
    max_cards: Optional[int],
):
    """Print the prompt that would be sent for SOURCE, without calling a model."""
    try:
        raw_text = load_source_text(source, text)
        validate_text(raw_text)
        settings = resolve_settings({"max_cards": max_cards}, store)
        card_types = parse_card_types(types) if types else settings.enabled_card_types
    except (FlashcardError, FileNotFoundError) as e:
        fail(str(e))

    click.echo(build_prompt(preprocess_text(raw_text), card_types, settings.max_cards))


@cli.command()
@click.argument("cards_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--folder", "-f", type=str, help="Destination folder name")
@click.option("--output", "-o", type=click.Path(), help="Outline file (default: ./<folder>.md)")
@click.option("--apkg", "apkg_path", type=click.Path(), help="Also export an Anki .apkg deck")
@click.pass_obj
def render(
    store: SettingsStore,
    cards_json: str,
    folder: Optional[str],
    output: Optional[str],
    apkg_path: Optional[str],
):
    """Render saved cards or a saved model reply without calling a model."""
    try:
        settings = resolve_settings({"target_folder": folder}, store)
        cards = load_cards_from_json(cards_json)
        if not cards:
            raise NoValidCardsError(f"No valid cards found in {cards_json}")

        host = OutlineHost()
        report = asyncio.run(render_cards(cards, settings, host))
    except FlashcardError as e:
        fail(str(e))

    write_outputs(report, host, settings, output, None, apkg_path)


@cli.group()
def config():
    """Show or change stored settings."""


@config.command("show")
@click.pass_obj
def config_show(store: SettingsStore):
    """Show the settings a generation run would use."""
    try:
        settings = resolve_settings(store=store)
    except FlashcardError as e:
        fail(str(e))

    table = Table(title=f"Settings ({store.path})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.safe_dump().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))

    console.print(table)
    console.print(f"Card types: {', '.join(t.value for t in CardType)}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set(store: SettingsStore, key: str, value: str):
    """Store a setting, e.g. 'config set provider claude'."""
    try:
        parsed = parse_setting_value(key, value)
        path = store.save({key: parsed})
    except FlashcardError as e:
        fail(str(e))

    shown = "***REDACTED***" if key == "api_key" else parsed
    console.print(f"[green]O[/green] {key} = {shown} (saved to {path})")


@config.command("clear")
@click.pass_obj
def config_clear(store: SettingsStore):
    """Delete all stored settings."""
    if store.clear():
        console.print("[green]O[/green] Settings deleted")
    else:
        console.print("[yellow]No stored settings found[/yellow]")


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
