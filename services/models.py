"""Immutable records for variation axes, spec trees, SKUs and products.

Every record is a frozen pydantic model serialised with camelCase aliases,
which is the shape of the exported product JSON.  Updates go through
``model_copy(update=...)``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Variations and spec trees
# ---------------------------------------------------------------------------


class VariationAxis(_Record):
    """A named dimension of variation with its ordered values."""

    type: str
    values: tuple[str, ...] = ()


class SpecNode(_Record):
    """One node of the spec forest.

    ``sub_specs`` holds every node of the next axis, or ``None`` on the
    last axis.
    """

    id: str
    label: str
    type: str
    offer_id: str = ""
    sub_specs: tuple[SpecNode, ...] | None = None


class SpecLeaf(_Record):
    """Last node of a SKU's spec chain."""

    kind: Literal["leaf"] = "leaf"
    id: str
    label: str
    type: str
    offer_id: str

    def nodes(self) -> Iterator[SpecLeaf | SpecChain]:
        yield self

    def leaf(self) -> SpecLeaf:
        return self

    def as_spec_node(self) -> SpecNode:
        return SpecNode(id=self.id, label=self.label, type=self.type, offer_id=self.offer_id)


class SpecChain(_Record):
    """Inner node of a SKU's spec chain; always has exactly one successor."""

    kind: Literal["chain"] = "chain"
    id: str
    label: str
    type: str
    offer_id: str
    next: PathSpec

    def nodes(self) -> Iterator[SpecLeaf | SpecChain]:
        """Yield the chain from this node down to the leaf."""
        node: SpecLeaf | SpecChain = self
        while isinstance(node, SpecChain):
            yield node
            node = node.next
        yield node

    def leaf(self) -> SpecLeaf:
        return self.next.leaf()

    def as_spec_node(self) -> SpecNode:
        return SpecNode(
            id=self.id,
            label=self.label,
            type=self.type,
            offer_id=self.offer_id,
            sub_specs=(self.next.as_spec_node(),),
        )


PathSpec = Annotated[SpecLeaf | SpecChain, Field(discriminator="kind")]

SpecNode.model_rebuild()
SpecChain.model_rebuild()


# ---------------------------------------------------------------------------
# SKUs and products
# ---------------------------------------------------------------------------


class Installment(_Record):
    count: int
    value: float
    value_text: str


class Image(_Record):
    value: str


class Sku(_Record):
    """One concrete variant: a single path through the spec forest."""

    original_product_id: str
    sku_id: str
    name: str
    ean: str
    price_text: str = ""
    old_price_text: str = ""
    price: float = 0
    old_price: float = 0
    installment: Installment | None = None
    images: tuple[Image, ...] = ()
    specs: tuple[PathSpec]

    @property
    def spec(self) -> SpecLeaf | SpecChain:
        return self.specs[0]

    @field_serializer("specs")
    def _serialize_specs(self, specs: tuple[Any, ...], info: SerializationInfo) -> list[dict]:
        # Exported in the forest node shape: {..., "subSpecs": [next] | null}
        return [
            spec.as_spec_node().model_dump(mode=info.mode, by_alias=bool(info.by_alias))
            for spec in specs
        ]


class ProductForm(_Record):
    """Product identity and description as entered by the user."""

    id: str
    name: str = ""
    description: str = ""


class Product(_Record):
    id: str
    name: str = ""
    description: str = ""
    price_text: str = ""
    old_price_text: str = ""
    price: float = 0
    old_price: float = 0
    installment: Installment | None = None
    images: tuple[Image, ...] = ()
    specs: tuple[SpecNode, ...] = ()
    skus: tuple[Sku, ...] = ()
