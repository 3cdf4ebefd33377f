"""SKU identity helpers: offer ids, names, EANs and price text."""

from __future__ import annotations

import json
import random
import uuid
from collections.abc import Iterable

# (type, label) pairs from the root of a spec tree down to one node.
SpecPath = tuple[tuple[str, str], ...]

_EAN_MIN = 1_000_000_000_000
_EAN_MAX = 9_999_999_999_999

_STABLE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "mock-sku-generator/offer")


def random_offer_id(path: SpecPath) -> str:
    """Return a fresh opaque offer id; *path* is ignored."""
    return str(uuid.uuid4())


def stable_offer_id(path: SpecPath) -> str:
    """Derive an offer id from the variation path so rebuilds reproduce it.

    The path is JSON-encoded so labels containing separators cannot collide.
    """
    key = json.dumps([list(step) for step in path], ensure_ascii=False)
    return str(uuid.uuid5(_STABLE_NAMESPACE, key))


def generate_sku_name(product_name: str, labels: Iterable[str]) -> str:
    """Join the product name and the spec labels with single spaces.

    Only the outer whitespace is trimmed, so an empty product name yields
    just the labels.
    """
    return " ".join([product_name, *labels]).strip()


def generate_ean(rng: random.Random | None = None) -> str:
    """Return a random 13-digit EAN string."""
    source = rng if rng is not None else random
    return str(source.randrange(_EAN_MIN, _EAN_MAX))


def format_price(value: float, symbol: str = "R$") -> str:
    """Format *value* as ``"R$ 19,90"``."""
    amount = f"{value:.2f}".replace(".", ",")
    return f"{symbol} {amount}"
