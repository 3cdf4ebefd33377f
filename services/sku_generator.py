"""SKU generation from a spec forest.

Every root-to-leaf path of the forest becomes one SKU.  The path is stored
on the SKU as a single-branch spec chain; the SKU name is built from the
chain's labels and the SKU id is the offer id of the chain's leaf.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator, Sequence

from services.models import PathSpec, Sku, SpecChain, SpecLeaf, SpecNode
from utils.sku import generate_ean, generate_sku_name

logger = logging.getLogger(__name__)


def iter_paths(forest: Sequence[SpecNode]) -> Iterator[tuple[SpecNode, ...]]:
    """Yield every root-to-leaf path, depth first in forest order."""
    for root in forest:
        yield from _paths_from(root, ())


def _paths_from(
    node: SpecNode, prefix: tuple[SpecNode, ...]
) -> Iterator[tuple[SpecNode, ...]]:
    path = (*prefix, node)
    if node.sub_specs is None:
        yield path
        return
    for child in node.sub_specs:
        yield from _paths_from(child, path)


def count_combinations(forest: Sequence[SpecNode]) -> int:
    """Number of root-to-leaf paths, i.e. the number of SKUs."""
    return sum(1 for _ in iter_paths(forest))


def _to_path_spec(path: tuple[SpecNode, ...]) -> PathSpec:
    """Materialise a forest path as a spec chain, built leaf first."""
    leaf = path[-1]
    spec: PathSpec = SpecLeaf(
        id=leaf.id, label=leaf.label, type=leaf.type, offer_id=leaf.offer_id
    )
    for node in reversed(path[:-1]):
        spec = SpecChain(
            id=node.id,
            label=node.label,
            type=node.type,
            offer_id=node.offer_id,
            next=spec,
        )
    return spec


def flatten_to_skus(
    forest: Sequence[SpecNode],
    product_id: str,
    product_name: str,
    rng: random.Random | None = None,
) -> tuple[Sku, ...]:
    """Return one base SKU per forest path, in forest order.

    EANs are drawn from *rng* (the ``random`` module when omitted); with
    an equally seeded *rng* the output is identical across calls.
    """
    skus = []
    for path in iter_paths(forest):
        spec = _to_path_spec(path)
        skus.append(
            Sku(
                original_product_id=product_id,
                sku_id=spec.leaf().offer_id,
                name=generate_sku_name(product_name, (node.label for node in spec.nodes())),
                ean=generate_ean(rng),
                specs=(spec,),
            )
        )

    logger.debug("Flattened %d SKU(s) for product %s", len(skus), product_id)
    return tuple(skus)
