"""Main CLI entry point for zone-aware-mapper.

This module provides a command-line interface using Typer:

- ``describe``: list the registered pairs, their direction and which timestamp
  fields convert or pass through.
- ``convert``: read a JSON record, map it to another record type and print the
  result as JSON.

Configuration comes from the environment / `.env` (see `zone_mapper.config`).
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

from .config import get_settings
from .errors import ConfigurationError, MappingNotFoundError
from .mapper import build_mapper
from .mapping.registry import MappingRegistry
from .models.data import AppointmentDto, PersonDto
from .models.domain import Appointment, Person

app = typer.Typer(help="Zone-aware record mapper CLI")

RECORD_TYPES: dict[str, type[BaseModel]] = {
    cls.__name__: cls for cls in (PersonDto, AppointmentDto, Person, Appointment)
}


def _load_environment() -> None:
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
        logging.getLogger(__name__).debug("Loaded environment from %s", env_file)


def _build() -> MappingRegistry:
    try:
        settings = get_settings()
        logging.basicConfig(level=settings.LOG_LEVEL)
        return build_mapper(settings)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)


def _record_type(name: str) -> type[BaseModel]:
    try:
        return RECORD_TYPES[name]
    except KeyError:
        known = ", ".join(sorted(RECORD_TYPES))
        typer.echo(f"Unknown record type {name!r}; expected one of: {known}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """Zone-aware record mapper CLI.

    Use a subcommand like 'describe' or 'convert'.
    """
    _load_environment()


@app.command(help="List registered mapping pairs and their timestamp handling.")
def describe() -> None:
    registry = _build()
    typer.echo(f"Local zone: {registry.zone.key}")
    for handle in registry.pairs():
        typer.echo(f"{handle} [{handle.direction.value}]")
        hook = handle.timestamp_hook
        converted = [f.name for f in hook.converted_fields] if hook else []
        passthrough = [f.name for f in hook.passthrough_fields] if hook else []
        typer.echo(f"  convert:     {', '.join(converted) or '-'}")
        typer.echo(f"  passthrough: {', '.join(passthrough) or '-'}")
        if handle.resolvers:
            typer.echo(f"  resolved:    {', '.join(handle.resolvers)}")


@app.command(help="Map a JSON record from SOURCE type to DEST type.")
def convert(
    source: str = typer.Argument(..., help="Source record type, e.g. PersonDto"),
    dest: str = typer.Argument(..., help="Destination record type, e.g. Person"),
    json_text: Optional[str] = typer.Option(
        None, "--json", help="Source record as JSON (read from stdin when omitted)"
    ),
) -> None:
    """Validate the input as SOURCE, map it to DEST and print DEST as JSON."""
    source_type = _record_type(source)
    dest_type = _record_type(dest)
    registry = _build()
    raw = json_text if json_text is not None else sys.stdin.read()
    try:
        record = source_type.model_validate_json(raw)
    except ValidationError as e:
        typer.echo(f"Invalid {source} record:\n{e}", err=True)
        raise typer.Exit(code=1)
    try:
        result = registry.map(record, dest_type)
    except MappingNotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(result.model_dump_json(indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
