"""
oidgen CLI

Command-line interface for generating and inspecting ObjectIds.

Usage:
    oidgen new --count 3
    oidgen inspect 507f1f77bcf86cd799439011
    oidgen from-time 2025-01-15T12:00:00Z --unique
    oidgen check 507f1f77bcf86cd799439011
"""

import json
from datetime import datetime

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from oidgen.generator import Generator
from oidgen.ids import ObjectIdFactory
from oidgen.kernel.errors import InvalidIdentifier
from oidgen.kernel.logging import configure_from_env
from oidgen.kernel.settings import GeneratorSettings
from oidgen.object_id import ObjectId

# Logs go to stderr (stdout carries the ids)
configure_from_env()

app = typer.Typer(
    name="oidgen",
    help="Generate and inspect 12-byte ObjectIds",
    add_completion=False,
)


def get_factory() -> ObjectIdFactory:
    """Build a factory from OIDGEN_* environment settings"""
    try:
        settings = GeneratorSettings.from_env()
    except (ValueError, ValidationError) as exc:
        typer.echo(f"Error: Invalid OIDGEN_* configuration: {exc}", err=True)
        raise typer.Exit(1)
    return ObjectIdFactory(Generator(settings))


def parse_or_exit(value: str) -> ObjectId:
    try:
        return ObjectId.from_hex(value)
    except InvalidIdentifier as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


def describe(oid: ObjectId) -> dict[str, object]:
    return {
        "id": oid.to_hex(),
        "generation_time": oid.generation_time.isoformat(),
        "timestamp": oid.timestamp,
        "machine_id": oid.machine_id.hex(),
        "process_id": oid.process_id,
        "counter": oid.counter,
    }


@app.command()
def new(
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Number of ids")] = 1,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print extended JSON ({\"$oid\": ...})")
    ] = False,
) -> None:
    """Generate fresh ids"""
    factory = get_factory()
    for _ in range(count):
        oid = factory.new()
        typer.echo(oid.to_json() if json_output else oid.to_hex())


@app.command()
def inspect(
    value: Annotated[str, typer.Argument(help="24-character hex id")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Decode the fields of an id"""
    fields = describe(parse_or_exit(value))

    if json_output:
        typer.echo(json.dumps(fields, indent=2))
    else:
        typer.echo(f"ObjectId: {fields['id']}")
        typer.echo(f"  Generated: {fields['generation_time']}")
        typer.echo(f"  Machine: {fields['machine_id']}")
        typer.echo(f"  Process: {fields['process_id']}")
        typer.echo(f"  Counter: {fields['counter']}")


@app.command("from-time")
def from_time(
    when: Annotated[str, typer.Argument(help="ISO 8601 time (naive = UTC)")],
    unique: Annotated[
        bool, typer.Option("--unique", help="Fill machine/process/counter fields")
    ] = False,
) -> None:
    """Build an id for a point in time (zero-filled unless --unique)"""
    try:
        moment = datetime.fromisoformat(when.replace("Z", "+00:00"))
    except ValueError:
        typer.echo(f"Error: Invalid time: {when}", err=True)
        raise typer.Exit(1)

    if unique:
        oid = get_factory().from_time(moment, unique=True)
    else:
        oid = ObjectId.from_time(moment)
    typer.echo(oid.to_hex())


@app.command()
def check(
    value: Annotated[str, typer.Argument(help="Candidate id")],
) -> None:
    """Exit 0 if the value is a legal hex id, 1 otherwise"""
    if ObjectId.is_legal(value):
        typer.echo("valid")
    else:
        typer.echo("invalid", err=True)
        raise typer.Exit(1)


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
