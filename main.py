"""CLI entry point for the mock SKU generator."""

from __future__ import annotations

import logging
import random

import click

from config import settings
from services.models import VariationAxis
from services.product_service import GenerationOptions, ProductStore
from utils.sku import random_offer_id, stable_offer_id


def _parse_axis(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> list[VariationAxis]:
    """Turn ``TYPE=v1,v2`` options into variation axes."""
    axes = []
    for raw in value:
        axis_type, sep, values = raw.partition("=")
        if not sep:
            raise click.BadParameter(f"expected TYPE=VALUE[,VALUE...], got '{raw}'")
        axes.append(VariationAxis(type=axis_type, values=tuple(values.split(","))))
    return axes


@click.group()
def cli() -> None:
    """Mock product and SKU generator."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.command()
@click.option("--name", default="", help="Product name (prefix of every SKU name).")
@click.option("--description", default="", help="Product description.")
@click.option("--product-id", default=None, help="Product id (random uuid4 by default).")
@click.option(
    "--axis",
    "axes",
    multiple=True,
    callback=_parse_axis,
    help="Variation as TYPE=v1,v2; repeat for more axes, first is outermost.",
)
@click.option(
    "--stable-ids/--random-ids",
    default=settings.stable_offer_ids,
    help="Derive offer ids from the variation path instead of random uuids.",
)
@click.option("--seed", type=int, default=settings.ean_seed, help="Seed for generated EANs.")
@click.option("--summary", is_flag=True, help="Fill product pricing from the cheapest SKU.")
def generate(
    name: str,
    description: str,
    product_id: str | None,
    axes: list[VariationAxis],
    stable_ids: bool,
    seed: int | None,
    summary: bool,
) -> None:
    """Print the generated product as JSON."""
    from api.exceptions import AppError

    options = GenerationOptions(
        offer_id=stable_offer_id if stable_ids else random_offer_id,
        rng=random.Random(seed) if seed is not None else None,
        currency_symbol=settings.currency_symbol,
    )
    store = ProductStore(options, product_id=product_id)
    store.update_form(name=name, description=description)
    try:
        for axis in axes:
            store.add_variation(axis)
    except AppError as exc:
        raise click.UsageError(str(exc)) from exc

    if summary:
        store.summarize()

    click.echo(store.export())


@cli.command()
def web() -> None:
    """Start the Flask API server."""
    from api.app import create_app

    app = create_app()
    app.run(
        host=settings.flask_host,
        port=settings.flask_port,
        debug=settings.flask_debug,
    )


if __name__ == "__main__":
    cli()
