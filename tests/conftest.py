"""Shared test fixtures."""

from __future__ import annotations

import random
from collections.abc import Generator

import pytest
from flask.testing import FlaskClient

from api.app import create_app
from config import Config
from services.models import VariationAxis
from services.product_service import GenerationOptions, ProductStore


@pytest.fixture
def color_size_axes() -> list[VariationAxis]:
    """Two axes: color (red, blue) then size (S, M)."""
    return [
        VariationAxis(type="color", values=("red", "blue")),
        VariationAxis(type="size", values=("S", "M")),
    ]


@pytest.fixture
def options() -> GenerationOptions:
    """Random offer ids, seeded EANs."""
    return GenerationOptions(rng=random.Random(1234))


@pytest.fixture
def store(options: GenerationOptions) -> ProductStore:
    """Empty store for a product with a known id."""
    return ProductStore(options, product_id="prod-1")


@pytest.fixture
def client(store: ProductStore) -> Generator[FlaskClient, None, None]:
    """Flask test client backed by the ``store`` fixture."""
    app = create_app(Config(cors_origins=["http://localhost:3000"]), store=store)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
