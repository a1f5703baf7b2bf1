"""Command-line interface for the StoryLingo translation assistant."""

import click
from typing import List
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .assistant import heuristics
from .assistant.reconcile import reconcile
from .assistant.trigger import TriggerDecision, evaluate_gates
from .config import config
from .models.draft import TranslationDraft
from .storage.document_store import JsonFileDocumentStore
from .storage.draft_store import DraftStore
from .translation.clients.deepl_client import DeepLClient
from .translation.clients.openai_client import OpenAIAssistantClient
from .translation.word_translator import TranslationServiceError, WordTranslator

console = Console()


def _text_options(func):
    """Options shared by the assistant commands."""
    options = [
        click.option("--original", "-o", required=True, help="Original story text"),
        click.option("--translation", "-t", required=True, help="Your translation"),
        click.option("--source", "-s", "source_lang", required=True, help="Language code of the original"),
        click.option("--target", "-l", "target_lang", required=True, help="Language code of your translation"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _require_openai_key():
    if not config.openai_api_key:
        console.print("[red]Error: OPENAI_API_KEY is not set[/red]")
        raise click.Abort()


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """StoryLingo translation assistant CLI."""
    pass


@cli.command()
@_text_options
@click.option(
    "--force",
    is_flag=True,
    help="Assess even if the text would not trigger an automatic assessment"
)
def assess(original: str, translation: str, source_lang: str, target_lang: str, force: bool):
    """Score a translation the way the AI assistant does."""
    _require_openai_key()

    if not force:
        decision = evaluate_gates(translation, original, "", True, config.thresholds)
        if decision is not TriggerDecision.ASSESS:
            console.print(f"[yellow]Not assessed:[/yellow] {decision.value.replace('_', ' ')}")
            console.print("[dim]Use --force to assess anyway[/dim]")
            return

    client = OpenAIAssistantClient()
    with console.status("Assessing translation..."):
        result = client.assess_translation(original, translation, source_lang, target_lang)

    outcome = reconcile(result, translation, config.thresholds)
    score_color = "green" if outcome.score >= 80 else "yellow" if outcome.score >= 60 else "red"

    panel_content = (
        f"[bold]Score:[/bold] [{score_color}]{outcome.score}[/{score_color}]\n"
        f"[bold]Feedback:[/bold] {outcome.feedback}"
    )
    if outcome.has_improved_translation:
        panel_content += f"\n\n[green]Improved translation:[/green] {outcome.improved_translation}"

    console.print(Panel(panel_content, title="Assessment"))


@cli.command()
@_text_options
def alternatives(original: str, translation: str, source_lang: str, target_lang: str):
    """Suggest alternative phrasings of a translation."""
    _require_openai_key()

    if not heuristics.can_request_alternatives(translation):
        console.print(
            "[yellow]Please complete at least one full sentence ending with a period, "
            "question mark, or exclamation point before requesting alternatives.[/yellow]"
        )
        return

    client = OpenAIAssistantClient()
    with console.status("Generating alternatives..."):
        results = client.get_alternative_translations(original, translation, source_lang, target_lang)

    if not results:
        console.print("[yellow]No alternatives available[/yellow]")
        return

    for i, alternative in enumerate(results, 1):
        console.print(f"[cyan]{i}.[/cyan] {alternative}")


@cli.command()
@click.argument("text")
@click.option("--source", "-s", "source_lang", required=True, help="Language code of the text")
@click.option("--target", "-l", "target_lang", required=True, help="Language code to translate into")
def translate(text: str, source_lang: str, target_lang: str):
    """Translate a word or phrase."""
    if not config.deepl_api_key:
        console.print("[red]Error: DEEPL_API_KEY is not set[/red]")
        raise click.Abort()

    translator = WordTranslator(DeepLClient())
    try:
        result = translator.translate(text, source_lang, target_lang)
    except TranslationServiceError:
        console.print("[red]Error translating text[/red]")
        raise click.Abort()

    console.print(f"[dim]{result.original}[/dim] → [green]{result.translated}[/green]")


@cli.group()
def drafts():
    """Manage saved translation drafts."""
    pass


@drafts.command("list")
@click.option("--story", "story_id", required=True, help="Story ID")
@click.option("--user", "user_id", required=True, help="User ID (email or anonymous id)")
def list_drafts(story_id: str, user_id: str):
    """List drafts for a story, newest first."""
    store = DraftStore(JsonFileDocumentStore(config.data_dir))
    results = store.list(story_id, user_id)

    if not results:
        console.print("[yellow]No drafts saved yet[/yellow]")
        return

    _print_drafts_table(results)


@drafts.command("delete")
@click.option("--story", "story_id", required=True, help="Story ID")
@click.option("--user", "user_id", required=True, help="User ID (email or anonymous id)")
@click.argument("draft_id")
def delete_draft(story_id: str, user_id: str, draft_id: str):
    """Delete a draft."""
    store = DraftStore(JsonFileDocumentStore(config.data_dir))
    store.delete(story_id, user_id, draft_id)
    console.print(f"[green]Deleted draft {draft_id}[/green]")


def _print_drafts_table(results: List[TranslationDraft]):
    """Print table of drafts."""
    table = Table(show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Lang", justify="center", width=6)
    table.add_column("Content", max_width=60)

    for d in results:
        content = d.content[:80] + "..." if len(d.content) > 80 else d.content
        table.add_row(d.id, d.date, d.language, content)

    console.print(table)


if __name__ == "__main__":
    cli()
