"""Spec forest generation.

Expands an ordered list of variation axes into a forest of spec nodes.  The
first axis forms the roots, every node's ``sub_specs`` holds the whole next
axis, and the last axis forms the leaves.  Each root-to-leaf path is one
combination of axis values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from services.models import SpecNode, VariationAxis
from utils.sku import SpecPath, random_offer_id

logger = logging.getLogger(__name__)

OfferIdFactory = Callable[[SpecPath], str]


def _level_nodes(axis: VariationAxis) -> tuple[SpecNode, ...]:
    """One leaf node per value, in value order."""
    return tuple(
        SpecNode(id=value, label=value, type=axis.type)
        for value in axis.values
    )


def _assign_offer_ids(
    nodes: tuple[SpecNode, ...],
    parent_path: SpecPath,
    offer_id: OfferIdFactory,
) -> tuple[SpecNode, ...]:
    """Copy *nodes* recursively, giving every copy its own offer id."""
    result = []
    for node in nodes:
        path = (*parent_path, (node.type, node.label))
        children = None
        if node.sub_specs is not None:
            children = _assign_offer_ids(node.sub_specs, path, offer_id)
        result.append(
            node.model_copy(update={"offer_id": offer_id(path), "sub_specs": children})
        )
    return tuple(result)


def build_forest(
    axes: Sequence[VariationAxis],
    offer_id: OfferIdFactory = random_offer_id,
) -> tuple[SpecNode, ...]:
    """Build the spec forest for *axes*.

    Levels are folded from the last axis back to the first, so the last
    axis ends up at the leaves.  Offer ids come from *offer_id*, called
    once per node with the node's ``(type, label)`` path; the default
    returns a new uuid4 on every call, so rebuilding the same axes yields
    the same shape with different ids.

    No axes, or any axis without values, gives an empty forest.
    """
    if not axes or any(not axis.values for axis in axes):
        return ()

    current: tuple[SpecNode, ...] = ()
    for index, axis in enumerate(reversed(axes)):
        level = _level_nodes(axis)
        if index == 0:
            current = level
        else:
            current = tuple(
                node.model_copy(update={"sub_specs": current}) for node in level
            )

    forest = _assign_offer_ids(current, (), offer_id)
    logger.debug(
        "Built spec forest: %d axes, %d roots", len(axes), len(forest)
    )
    return forest
