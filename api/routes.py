"""API endpoints for the mock SKU generator."""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, g, jsonify, request
from pydantic import BaseModel

from api.errors import error_response, handle_errors
from services.models import Product, VariationAxis
from services.product_service import ProductStore, SkuEdit

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")

STORE_KEY = "product_store"


class _ProductPatch(BaseModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None


def _product_json(product: Product) -> dict:
    return product.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Store lifecycle
# ---------------------------------------------------------------------------


@api_bp.before_request
def _bind_store() -> None:
    """Expose the app's product store on flask.g."""
    g.store = current_app.extensions[STORE_KEY]


def _store() -> ProductStore:
    return g.store


def _json_body() -> dict | None:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


# ===========================================================================
# Product
# ===========================================================================


@api_bp.route("/product", methods=["GET"])
@handle_errors
def get_product() -> tuple:
    """Return the current product with its specs and SKUs."""
    return jsonify(_product_json(_store().product)), 200


@api_bp.route("/product", methods=["PUT"])
@handle_errors
def update_product() -> tuple:
    """Update product id, name and/or description."""
    data = _json_body()
    if data is None:
        return error_response("Request body must be JSON", 400)

    patch = _ProductPatch.model_validate(data)
    state = _store().update_form(
        product_id=patch.id, name=patch.name, description=patch.description
    )
    return jsonify(_product_json(state.product)), 200


@api_bp.route("/product/summary", methods=["POST"])
@handle_errors
def summarize_product() -> tuple:
    """Copy the cheapest SKU's pricing onto the product."""
    state = _store().summarize()
    return jsonify(_product_json(state.product)), 200


@api_bp.route("/product/export", methods=["GET"])
@handle_errors
def export_product() -> Response:
    """Indented JSON dump of the product, for inspection."""
    return Response(_store().export(), mimetype="application/json")


# ===========================================================================
# Variations
# ===========================================================================


@api_bp.route("/variations", methods=["GET"])
@handle_errors
def list_variations() -> tuple:
    """List variation axes in order."""
    variations = [
        axis.model_dump(mode="json", by_alias=True)
        for axis in _store().state.variations
    ]
    return jsonify(variations), 200


@api_bp.route("/variations", methods=["POST"])
@handle_errors
def add_variation() -> tuple:
    """Add a variation axis and regenerate the SKUs."""
    data = _json_body()
    if data is None:
        return error_response("Request body must be JSON", 400)

    axis = VariationAxis.model_validate(data)
    state = _store().add_variation(axis)
    return jsonify(_product_json(state.product)), 201


@api_bp.route("/variations/<axis_type>", methods=["PUT"])
@handle_errors
def edit_variation(axis_type: str) -> tuple:
    """Replace a variation axis (type and/or values) and regenerate."""
    data = _json_body()
    if data is None:
        return error_response("Request body must be JSON", 400)

    # Omitted type keeps the current name.
    data.setdefault("type", axis_type)
    axis = VariationAxis.model_validate(data)
    state = _store().edit_variation(axis_type, axis)
    return jsonify(_product_json(state.product)), 200


@api_bp.route("/variations/<axis_type>", methods=["DELETE"])
@handle_errors
def remove_variation(axis_type: str) -> tuple:
    """Remove a variation axis and regenerate."""
    state = _store().remove_variation(axis_type)
    return jsonify(_product_json(state.product)), 200


# ===========================================================================
# SKUs
# ===========================================================================


@api_bp.route("/skus", methods=["GET"])
@handle_errors
def list_skus() -> tuple:
    """List the generated SKUs."""
    skus = [
        sku.model_dump(mode="json", by_alias=True)
        for sku in _store().product.skus
    ]
    return jsonify(skus), 200


@api_bp.route("/skus/<sku_id>", methods=["PUT"])
@handle_errors
def edit_sku(sku_id: str) -> tuple:
    """Set price, old price, installment and images of one SKU."""
    data = _json_body()
    if data is None:
        return error_response("Request body must be JSON", 400)

    edit = SkuEdit.model_validate(data)
    state = _store().edit_sku(sku_id, edit)
    sku = next((s for s in state.product.skus if s.sku_id == sku_id), None)
    if sku is None:
        return error_response(f"SKU '{sku_id}' not found", 404)
    return jsonify(sku.model_dump(mode="json", by_alias=True)), 200
