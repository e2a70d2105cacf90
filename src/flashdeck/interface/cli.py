"""flashdeck CLI: root commands and deck/card/config subgroups."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from flashdeck.application.backup import export_data, import_data
from flashdeck.application.session import ANSWER_BUTTONS, ReviewSession
from flashdeck.application.stats import MetricsCalculator
from flashdeck.consts import VERSION
from flashdeck.domain.models import Quality
from flashdeck.interface._common import (
    _find_card,
    _find_deck,
    _format_date,
    _open_service,
    _resolve_with_overrides,
    _warn_if_unsaved,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashdeck: SM-2 spaced repetition flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

deck_app = typer.Typer(help="Create, list, rename and delete decks.", no_args_is_help=True)
app.add_typer(deck_app, name="deck")

card_app = typer.Typer(help="Add, list, edit and delete cards.", no_args_is_help=True)
app.add_typer(card_app, name="card")

config_app = typer.Typer(help="Manage flashdeck configuration.")
app.add_typer(config_app, name="config")

calculator = MetricsCalculator()


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Directory holding the collection. Defaults to config."),
    ] = None,
):
    """Global settings for flashdeck."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["data_dir"] = data_dir


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def version():
    """Print the flashdeck version."""
    typer.echo(VERSION)


@app.command()
def ratings():
    """List the quality ratings and the answer buttons that map to them."""
    buttons = {int(q): name.capitalize() for name, q in ANSWER_BUTTONS.items()}
    for quality in Quality:
        button = buttons.get(int(quality), "")
        typer.echo(f"{int(quality)}  {quality.label:<24} {button}")


@app.command()
def due(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Deck name or id to filter by.")] = None,
):
    """List cards due for review and new cards waiting to be studied."""
    service = _open_service(ctx)
    deck_id = _find_deck(service, deck).id if deck else None

    due_cards = service.due_cards(deck_id)
    new_cards = service.new_cards(deck_id)

    typer.echo(f"Due: {len(due_cards)}  New: {len(new_cards)}")
    for card in due_cards:
        tag = "new" if card.is_new else "due"
        typer.echo(f"  [{tag}] {card.id}  {card.front}")


@app.command()
def review(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Deck name or id to study.")] = None,
):
    """[bold green]Review[/bold green] due and new cards (3 due cards per new card)."""
    service = _open_service(ctx)
    deck_id = _find_deck(service, deck).id if deck else None

    session = ReviewSession(service, deck_id)
    if session.total == 0:
        typer.secho("No cards to review. Come back later.", fg="yellow")
        return

    while True:
        card = session.current
        if card is None:
            break

        status = "new" if card.is_new else "review"
        typer.echo(f"\n[{status}] {session.remaining} card(s) left")
        typer.secho(f"Q: {card.front}", bold=True)
        typer.prompt("Press Enter to show the answer", default="", show_default=False)
        typer.echo(f"A: {card.back}")

        quality = _prompt_quality()
        if quality is None:
            break
        session.answer(quality)
        _warn_if_unsaved(service)

    typer.secho(f"\nReviewed {session.reviewed_count} card(s) this session.", fg="green")


def _prompt_quality() -> int | None:
    """Ask for an answer button or a raw 0-5 rating. Returns None to quit."""
    shortcuts = {name[0]: quality for name, quality in ANSWER_BUTTONS.items()}
    while True:
        raw = typer.prompt("Again / Hard / Good / Easy (a/h/g/e, 0-5, q to quit)")
        choice = raw.strip().lower()
        if choice in ("q", "quit"):
            return None
        if choice in ANSWER_BUTTONS:
            return ANSWER_BUTTONS[choice]
        if choice in shortcuts:
            return shortcuts[choice]
        try:
            # Out-of-range ratings are clamped by the scheduler.
            return int(choice)
        except ValueError:
            typer.secho(f"Unrecognized answer: {raw!r}", fg="red")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show collection statistics: due/new counts, reviews today, streak."""
    service = _open_service(ctx)
    overall = calculator.overall_stats(service.collection)

    if json_output:
        typer.echo(json.dumps(asdict(overall), indent=2))
        return

    typer.echo(f"Decks: {overall.total_decks}  Cards: {overall.total_cards}")
    typer.echo(f"Due today: {overall.due_cards}  New: {overall.new_cards}")
    typer.echo(f"Total reviews: {overall.total_reviews}  Today: {overall.reviews_today}")
    typer.echo(f"Streak: {overall.streak} day(s)")
    typer.echo(f"Average ease: {overall.avg_ease_factor:.2f}")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    output: Annotated[
        Path | None, typer.Argument(help="File to write. Prints to stdout if omitted.")
    ] = None,
):
    """Export decks, cards and review history as JSON."""
    service = _open_service(ctx)
    data = export_data(service.collection)

    if output is None:
        typer.echo(data)
        return

    output.write_text(data, encoding="utf-8")
    typer.secho(f"Exported to {output}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="JSON backup to restore.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Replace the collection without confirmation.")
    ] = False,
):
    """Replace the collection with a JSON backup."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Cannot read {path}: {e}", fg="red")
        raise typer.Exit(1)

    collection = import_data(text)
    if collection is None:
        typer.secho("Failed to import data. Please check the file format.", fg="red")
        raise typer.Exit(1)

    service = _open_service(ctx)
    if not force:
        typer.confirm(
            f"Replace {len(service.collection.cards)} cards with "
            f"{len(collection.cards)} cards from {path.name}?",
            abort=True,
        )

    service.replace_collection(collection)
    _warn_if_unsaved(service)
    typer.secho(
        f"Imported {len(collection.decks)} decks, {len(collection.cards)} cards, "
        f"{len(collection.review_history)} reviews.",
        fg="green",
    )


# ---------------------------------------------------------------------------
# Deck subgroup
# ---------------------------------------------------------------------------


@deck_app.command("add")
def deck_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    description: Annotated[str, typer.Option(help="Optional description.")] = "",
):
    """Create a deck."""
    service = _open_service(ctx)
    deck = service.add_deck(name, description)
    _warn_if_unsaved(service)
    typer.secho(f"Created deck '{deck.name}' ({deck.id})", fg="green")


@deck_app.command("list")
def deck_list(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks with card counts."""
    service = _open_service(ctx)
    rows = []
    for deck in service.collection.decks:
        deck_stats = calculator.deck_stats(service.cards_for_deck(deck.id))
        rows.append({"id": deck.id, "name": deck.name, **asdict(deck_stats)})

    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        typer.secho("No decks yet. Create one with 'flashdeck deck add'.", fg="yellow")
        return

    for row in rows:
        typer.echo(
            f"{row['id']}  {row['name']}  "
            f"cards={row['total']} due={row['due']} new={row['new']}"
        )


@deck_app.command("rename")
def deck_rename(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name or id.")],
    name: Annotated[str, typer.Argument(help="New deck name.")],
    description: Annotated[str | None, typer.Option(help="New description.")] = None,
):
    """Rename a deck (and optionally change its description)."""
    service = _open_service(ctx)
    target = _find_deck(service, deck)
    service.update_deck(target.id, name=name, description=description)
    _warn_if_unsaved(service)
    typer.secho(f"Renamed '{target.name}' to '{name}'", fg="green")


@deck_app.command("delete")
def deck_delete(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name or id.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Delete without confirmation.")
    ] = False,
):
    """Delete a deck and all its cards."""
    service = _open_service(ctx)
    target = _find_deck(service, deck)
    if not force:
        typer.confirm(
            f"Delete deck '{target.name}' and all {len(service.cards_for_deck(target.id))} cards?",
            abort=True,
        )
    service.delete_deck(target.id)
    _warn_if_unsaved(service)
    typer.secho(f"Deleted deck '{target.name}'", fg="green")


# ---------------------------------------------------------------------------
# Card subgroup
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name or id.")],
    front: Annotated[str, typer.Argument(help="Question side.")],
    back: Annotated[str, typer.Argument(help="Answer side.")],
):
    """Add a card to a deck."""
    service = _open_service(ctx)
    target = _find_deck(service, deck)
    card = service.add_card(target.id, front, back)
    _warn_if_unsaved(service)
    typer.secho(f"Added card {card.id} to '{target.name}'", fg="green")


@card_app.command("list")
def card_list(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name or id.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List the cards of a deck with their review status."""
    service = _open_service(ctx)
    target = _find_deck(service, deck)
    cards = service.cards_for_deck(target.id)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "front": c.front,
                        "back": c.back,
                        "status": calculator.card_status(c),
                        "interval": c.interval,
                        "easeFactor": c.ease_factor,
                        "nextReviewDate": c.next_review_date,
                    }
                    for c in cards
                ],
                indent=2,
            )
        )
        return

    for c in cards:
        status = calculator.card_status(c)
        typer.echo(
            f"{c.id}  [{status}]  next={_format_date(c.next_review_date)}  "
            f"ease={c.ease_factor:.2f}  {c.front}"
        )


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    card: Annotated[str, typer.Argument(help="Card id (or unique prefix).")],
    front: Annotated[str | None, typer.Option(help="New question side.")] = None,
    back: Annotated[str | None, typer.Option(help="New answer side.")] = None,
):
    """Edit a card's content. Scheduling is left as it is."""
    if front is None and back is None:
        typer.secho("Nothing to change: pass --front and/or --back.", fg="yellow")
        raise typer.Exit(2)

    service = _open_service(ctx)
    target = _find_card(service, card)
    service.update_card(target.id, front=front, back=back)
    _warn_if_unsaved(service)
    typer.secho(f"Updated card {target.id}", fg="green")


@card_app.command("delete")
def card_delete(
    ctx: typer.Context,
    card: Annotated[str, typer.Argument(help="Card id (or unique prefix).")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Delete without confirmation.")
    ] = False,
):
    """Delete a card and its review history."""
    service = _open_service(ctx)
    target = _find_card(service, card)
    if not force:
        typer.confirm(f"Delete card '{target.front}'?", abort=True)
    service.delete_card(target.id)
    _warn_if_unsaved(service)
    typer.secho(f"Deleted card {target.id}", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))

