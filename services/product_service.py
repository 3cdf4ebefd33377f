"""Product state and its update events.

The product being mocked lives in a ``ProductState``.  Each event (identity
or description edit, variation add/edit/remove, SKU edit, summary) is a pure
function returning a new state; ``ProductStore`` holds the current state and
replaces it wholesale on every event.

Regeneration rules:

* variation changes rebuild the spec forest and the SKU list;
* product id or name changes re-flatten the existing forest, so offer ids
  and therefore SKU edits survive;
* a description change touches nothing but the description.

A variation change also clears the cheapest-SKU summary on the product,
since the SKU list it was taken from is replaced.

After regeneration, edited fields are copied from old SKUs whose ``sku_id``
is unchanged.  With the default random offer ids this never matches after a
variation change, so variation changes start the SKU edits over.
"""

from __future__ import annotations

import logging
import random
import threading
import uuid
from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.exceptions import ConflictError, NotFoundError, ValidationError
from config import Config
from services.models import Image, Installment, Product, ProductForm, Sku, VariationAxis
from services.sku_generator import flatten_to_skus
from services.spec_builder import OfferIdFactory, build_forest
from utils.sku import format_price, random_offer_id, stable_offer_id

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "price",
    "price_text",
    "old_price",
    "old_price_text",
    "installment",
    "images",
)

_EMPTY_SUMMARY = {
    "price": 0,
    "price_text": "",
    "old_price": 0,
    "old_price_text": "",
    "installment": None,
    "images": (),
}


class GenerationOptions(BaseModel):
    """How offer ids, EANs and price texts are produced."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    offer_id: OfferIdFactory = random_offer_id
    rng: random.Random | None = None
    currency_symbol: str = "R$"

    @classmethod
    def from_config(cls, config: Config) -> GenerationOptions:
        return cls(
            offer_id=stable_offer_id if config.stable_offer_ids else random_offer_id,
            rng=random.Random(config.ean_seed) if config.ean_seed is not None else None,
            currency_symbol=config.currency_symbol,
        )


class ProductState(BaseModel):
    model_config = ConfigDict(frozen=True)

    form: ProductForm
    variations: tuple[VariationAxis, ...] = ()
    product: Product


class SkuEdit(BaseModel):
    """User edits for one SKU."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    price: float = Field(gt=0)
    old_price: float = Field(default=0, ge=0)
    installment_count: int = Field(default=0, ge=0)
    installment_price: float = Field(default=0, ge=0)
    images: list[str]

    @field_validator("images")
    @classmethod
    def _drop_blank_images(cls, value: list[str]) -> list[str]:
        images = [url.strip() for url in value if url.strip()]
        if not images:
            raise ValueError("at least one image URL is required")
        return images


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def normalize_axis(axis_type: str, values: Iterable[str]) -> VariationAxis:
    """Strip the type and values, drop blanks and duplicates.

    Raises ValidationError when the type is empty or no value remains.
    """
    axis_type = axis_type.strip()
    if not axis_type:
        raise ValidationError("Variation type is required")

    cleaned: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    if not cleaned:
        raise ValidationError(f"Variation '{axis_type}' needs at least one value")

    return VariationAxis(type=axis_type, values=tuple(cleaned))


def apply_sku_edit(sku: Sku, edit: SkuEdit, currency_symbol: str = "R$") -> Sku:
    """Return *sku* with the edited price, installment and image fields."""
    installment = None
    if edit.installment_count > 0:
        installment = Installment(
            count=edit.installment_count,
            value=edit.installment_price,
            value_text=format_price(edit.installment_price, currency_symbol),
        )

    return sku.model_copy(
        update={
            "price": edit.price,
            "price_text": format_price(edit.price, currency_symbol),
            "old_price": edit.old_price,
            "old_price_text": format_price(edit.old_price, currency_symbol),
            "installment": installment,
            "images": tuple(Image(value=url) for url in edit.images),
        }
    )


def cheapest_sku(skus: Iterable[Sku]) -> Sku | None:
    """First SKU with the lowest price, or None when there are none."""
    return min(skus, key=lambda sku: sku.price, default=None)


def _merge_edits(skus: tuple[Sku, ...], previous: tuple[Sku, ...]) -> tuple[Sku, ...]:
    by_id = {sku.sku_id: sku for sku in previous}
    merged = []
    kept = 0
    for sku in skus:
        old = by_id.get(sku.sku_id)
        if old is not None:
            sku = sku.model_copy(
                update={field: getattr(old, field) for field in _EDITABLE_FIELDS}
            )
            kept += 1
        merged.append(sku)
    logger.debug("Kept edits for %d of %d SKU(s)", kept, len(skus))
    return tuple(merged)


def _regenerate(
    state: ProductState,
    options: GenerationOptions,
    *,
    rebuild_forest: bool,
) -> ProductState:
    form = state.form
    summary: dict = {}
    if rebuild_forest:
        forest = build_forest(state.variations, options.offer_id)
        summary = _EMPTY_SUMMARY
    else:
        forest = state.product.specs

    skus = flatten_to_skus(forest, form.id, form.name, options.rng)
    skus = _merge_edits(skus, state.product.skus)

    product = state.product.model_copy(
        update={
            "id": form.id,
            "name": form.name,
            "description": form.description,
            "specs": forest,
            "skus": skus,
            **summary,
        }
    )
    return state.model_copy(update={"product": product})


def _find_axis(state: ProductState, axis_type: str) -> int:
    for index, axis in enumerate(state.variations):
        if axis.type == axis_type:
            return index
    return -1


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def initial_state(product_id: str | None = None) -> ProductState:
    """Empty product with a fresh uuid4 id unless *product_id* is given."""
    form = ProductForm(id=product_id or str(uuid.uuid4()))
    return ProductState(form=form, product=Product(id=form.id))


def update_form(
    state: ProductState,
    *,
    options: GenerationOptions,
    product_id: str | None = None,
    name: str | None = None,
    description: str | None = None,
) -> ProductState:
    """Apply identity/description edits; ``None`` leaves a field unchanged."""
    if product_id is not None and not product_id.strip():
        raise ValidationError("Product id must not be empty")

    updates = {
        field: value
        for field, value in (("id", product_id), ("name", name), ("description", description))
        if value is not None
    }
    form = state.form.model_copy(update=updates)
    new_state = state.model_copy(update={"form": form})

    if form.id != state.form.id or form.name != state.form.name:
        return _regenerate(new_state, options, rebuild_forest=False)

    product = state.product.model_copy(update={"description": form.description})
    return new_state.model_copy(update={"product": product})


def add_variation(
    state: ProductState, axis: VariationAxis, *, options: GenerationOptions
) -> ProductState:
    """Append a variation axis and regenerate.

    Raises ConflictError when an axis with the same type already exists.
    """
    axis = normalize_axis(axis.type, axis.values)
    if _find_axis(state, axis.type) >= 0:
        raise ConflictError(f"Variation '{axis.type}' already exists")

    new_state = state.model_copy(update={"variations": (*state.variations, axis)})
    return _regenerate(new_state, options, rebuild_forest=True)


def edit_variation(
    state: ProductState,
    previous_type: str,
    axis: VariationAxis,
    *,
    options: GenerationOptions,
) -> ProductState:
    """Replace the axis named *previous_type* in place and regenerate."""
    index = _find_axis(state, previous_type)
    if index < 0:
        raise NotFoundError(f"Variation '{previous_type}' not found")

    axis = normalize_axis(axis.type, axis.values)
    clash = _find_axis(state, axis.type)
    if clash >= 0 and clash != index:
        raise ConflictError(f"Variation '{axis.type}' already exists")

    variations = list(state.variations)
    variations[index] = axis
    new_state = state.model_copy(update={"variations": tuple(variations)})
    return _regenerate(new_state, options, rebuild_forest=True)


def remove_variation(
    state: ProductState, axis_type: str, *, options: GenerationOptions
) -> ProductState:
    """Drop the axis named *axis_type* and regenerate."""
    if _find_axis(state, axis_type) < 0:
        raise NotFoundError(f"Variation '{axis_type}' not found")

    variations = tuple(axis for axis in state.variations if axis.type != axis_type)
    new_state = state.model_copy(update={"variations": variations})
    return _regenerate(new_state, options, rebuild_forest=True)


def edit_sku(
    state: ProductState,
    sku_id: str,
    edit: SkuEdit,
    *,
    options: GenerationOptions,
) -> ProductState:
    """Apply *edit* to the SKU with *sku_id*."""
    skus = list(state.product.skus)
    for index, sku in enumerate(skus):
        if sku.sku_id == sku_id:
            skus[index] = apply_sku_edit(sku, edit, options.currency_symbol)
            break
    else:
        raise NotFoundError(f"SKU '{sku_id}' not found")

    product = state.product.model_copy(update={"skus": tuple(skus)})
    return state.model_copy(update={"product": product})


def summarize(state: ProductState) -> ProductState:
    """Copy the cheapest SKU's pricing onto the product and gather all images."""
    skus = state.product.skus
    cheapest = cheapest_sku(skus)
    if cheapest is None:
        product = state.product.model_copy(update=_EMPTY_SUMMARY)
        return state.model_copy(update={"product": product})

    images = tuple(image for sku in skus for image in sku.images)
    product = state.product.model_copy(
        update={
            "price": cheapest.price,
            "price_text": cheapest.price_text,
            "old_price": cheapest.old_price,
            "old_price_text": cheapest.old_price_text,
            "installment": cheapest.installment,
            "images": images,
        }
    )
    return state.model_copy(update={"product": product})


def export_product(state: ProductState) -> str:
    """Indented camelCase JSON of the product."""
    return state.product.model_dump_json(by_alias=True, indent=2)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ProductStore:
    """Holds one ``ProductState`` and swaps it atomically on each event."""

    def __init__(
        self,
        options: GenerationOptions | None = None,
        product_id: str | None = None,
    ) -> None:
        self.options = options or GenerationOptions()
        self._lock = threading.Lock()
        self._state = initial_state(product_id)

    @property
    def state(self) -> ProductState:
        return self._state

    @property
    def product(self) -> Product:
        return self._state.product

    def _apply(self, event: Callable[..., ProductState], *args, **kwargs) -> ProductState:
        with self._lock:
            self._state = event(self._state, *args, **kwargs)
            return self._state

    def update_form(self, **fields: str | None) -> ProductState:
        state = self._apply(update_form, options=self.options, **fields)
        logger.info("Product %s updated", state.form.id)
        return state

    def add_variation(self, axis: VariationAxis) -> ProductState:
        state = self._apply(add_variation, axis, options=self.options)
        logger.info(
            "Added variation '%s' (%d SKU(s))", axis.type.strip(), len(state.product.skus)
        )
        return state

    def edit_variation(self, previous_type: str, axis: VariationAxis) -> ProductState:
        state = self._apply(edit_variation, previous_type, axis, options=self.options)
        logger.info(
            "Edited variation '%s' (%d SKU(s))", previous_type, len(state.product.skus)
        )
        return state

    def remove_variation(self, axis_type: str) -> ProductState:
        state = self._apply(remove_variation, axis_type, options=self.options)
        logger.info(
            "Removed variation '%s' (%d SKU(s))", axis_type, len(state.product.skus)
        )
        return state

    def edit_sku(self, sku_id: str, edit: SkuEdit) -> ProductState:
        state = self._apply(edit_sku, sku_id, edit, options=self.options)
        logger.info("Edited SKU %s", sku_id)
        return state

    def summarize(self) -> ProductState:
        return self._apply(summarize)

    def export(self) -> str:
        return export_product(self._state)
