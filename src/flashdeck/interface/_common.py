"""Helpers shared by CLI commands."""

import logging
from datetime import datetime

import typer

from flashdeck.application.collection_service import CollectionService
from flashdeck.application.config import AppConfig, resolve_config
from flashdeck.application.factory import get_collection_service
from flashdeck.domain.models import Card, Deck


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.getLogger().setLevel(level)


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides) -> AppConfig:
    """Resolve config, layering global CLI options and per-command overrides on top."""
    obj = (ctx.obj if ctx is not None else None) or {}
    merged = {
        "data_dir": obj.get("data_dir"),
        "verbose": obj.get("verbose") or None,
        **overrides,
    }
    config = resolve_config(merged)
    _configure_logging(config.verbose)
    return config


def _open_service(ctx: typer.Context) -> CollectionService:
    return get_collection_service(_resolve_with_overrides(ctx))


def _find_deck(service: CollectionService, ref: str) -> Deck:
    """Look a deck up by id, then by case-insensitive name. Exits if not found."""
    deck = service.get_deck(ref)
    if deck is None:
        matches = [d for d in service.collection.decks if d.name.lower() == ref.lower()]
        if len(matches) > 1:
            typer.secho(f"Deck name '{ref}' is ambiguous; use the deck id.", fg="red")
            raise typer.Exit(1)
        deck = matches[0] if matches else None
    if deck is None:
        typer.secho(f"Deck not found: {ref}", fg="red")
        raise typer.Exit(1)
    return deck


def _find_card(service: CollectionService, ref: str) -> Card:
    """Look a card up by id or unique id prefix. Exits if not found."""
    if not ref.strip():
        typer.secho("Card id must not be empty.", fg="red")
        raise typer.Exit(1)
    card = service.get_card(ref)
    if card is None:
        matches = [c for c in service.collection.cards if c.id.startswith(ref)]
        if len(matches) > 1:
            typer.secho(f"Card id prefix '{ref}' is ambiguous.", fg="red")
            raise typer.Exit(1)
        card = matches[0] if matches else None
    if card is None:
        typer.secho(f"Card not found: {ref}", fg="red")
        raise typer.Exit(1)
    return card


def _format_date(timestamp: int | None) -> str:
    if not timestamp:
        return "Never"
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d")


def _warn_if_unsaved(service: CollectionService) -> None:
    if not service.last_save_ok:
        typer.secho("WARNING: changes could not be saved to disk.", fg="yellow")
