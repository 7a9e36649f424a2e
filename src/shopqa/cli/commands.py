"""CLI commands for shopqa."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from shopqa.commands.api import get_brands_api, get_products_api, search_products_api
from shopqa.config import QAConfig, load_config
from shopqa.data.generators import TestDataGenerator
from shopqa.errors import ShopQAError
from shopqa.session import Session

console = Console()

GENERATE_KINDS = ("user", "email", "address", "creditcard", "signup")


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _to_jsonable(record: Any) -> Any:
    return record.to_dict() if hasattr(record, "to_dict") else record


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.option("--env", "-e", "environment", default=None, help="Target environment")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None, environment: str | None) -> None:
    """shopqa - storefront test toolkit."""
    ctx.ensure_object(dict)
    setup_logging(verbose)

    try:
        config_obj = load_config(config, environment=environment)
    except ShopQAError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    if verbose:
        config_obj.verbose = True

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("kind", type=click.Choice(GENERATE_KINDS, case_sensitive=False), default="user")
@click.option("--count", "-n", default=1, show_default=True, type=click.IntRange(min=1), help="Records to generate")
@click.option("--seed", type=int, default=None, help="Seed for reproducible output")
@click.pass_context
def generate(ctx: click.Context, kind: str, count: int, seed: int | None) -> None:
    """Generate test data records and print them as JSON.

    KIND is one of user, email, address, creditcard or signup.
    """
    config: QAConfig = ctx.obj["config"]
    generator = TestDataGenerator(
        locale=config.data_locale,
        seed=seed if seed is not None else config.data_seed,
    )
    kind = kind.lower()
    if kind == "signup":
        records: list[Any] = [generator.signup_data() for _ in range(count)]
    else:
        records = generator.bulk_data(count, kind)
    click.echo(json.dumps([_to_jsonable(r) for r in records], indent=2))


@cli.command("config")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show_config(ctx: click.Context, output_json: bool) -> None:
    """Print the resolved configuration."""
    config: QAConfig = ctx.obj["config"]
    values = config.model_dump(mode="json")

    if output_json:
        click.echo(json.dumps(values, indent=2))
        return

    table = Table(title=f"shopqa config ({config.environment})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, str(value))
    console.print(table)


@cli.group()
def api() -> None:
    """Call the storefront catalogue API."""


def _api_session(ctx: click.Context) -> Session:
    return Session(config=ctx.obj["config"])


def _print_products(title: str, products: list[Any]) -> None:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Price")
    table.add_column("Brand")
    table.add_column("Category")
    for product in products:
        table.add_row(str(product.id), product.name, product.price, product.brand, product.category.path)
    console.print(table)


@api.command()
@click.pass_context
def products(ctx: click.Context) -> None:
    """List all products."""
    with _api_session(ctx) as session:
        try:
            body = get_products_api(session)
        except ShopQAError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    _print_products(f"{len(body.products)} product(s), responseCode {body.responseCode}", body.products)


@api.command()
@click.pass_context
def brands(ctx: click.Context) -> None:
    """List all brands."""
    with _api_session(ctx) as session:
        try:
            body = get_brands_api(session)
        except ShopQAError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    table = Table(title=f"{len(body.brands)} brand(s), responseCode {body.responseCode}")
    table.add_column("ID", justify="right")
    table.add_column("Brand")
    for brand in body.brands:
        table.add_row(str(brand.id), brand.brand)
    console.print(table)


@api.command()
@click.argument("term")
@click.pass_context
def search(ctx: click.Context, term: str) -> None:
    """Search products by TERM."""
    with _api_session(ctx) as session:
        try:
            body = search_products_api(session, term)
        except ShopQAError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    if body.message and not body.products:
        console.print(f"[yellow]responseCode {body.responseCode}: {body.message}[/yellow]")
        return
    _print_products(f"{len(body.products)} match(es) for {term!r}", body.products)
