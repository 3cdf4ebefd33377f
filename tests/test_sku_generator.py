"""Tests for services.sku_generator."""

from __future__ import annotations

import json
import random

from services.models import SpecChain, SpecLeaf, VariationAxis
from services.sku_generator import flatten_to_skus, iter_paths
from services.spec_builder import build_forest


class TestFlattenToSkus:
    def test_empty_forest(self) -> None:
        assert flatten_to_skus(build_forest([]), "p1", "Tee") == ()

    def test_single_axis(self) -> None:
        forest = build_forest([VariationAxis(type="color", values=("red", "blue", "green"))])
        skus = flatten_to_skus(forest, "p1", "Tee")
        assert [s.name for s in skus] == ["Tee red", "Tee blue", "Tee green"]
        assert [s.sku_id for s in skus] == [n.offer_id for n in forest]
        assert all(isinstance(s.spec, SpecLeaf) for s in skus)

    def test_two_axes_names_and_ids(self, color_size_axes: list[VariationAxis]) -> None:
        forest = build_forest(color_size_axes)
        skus = flatten_to_skus(forest, "p1", "Tee")

        assert [s.name for s in skus] == ["Tee red S", "Tee red M", "Tee blue S", "Tee blue M"]

        leaves = [path[-1] for path in iter_paths(forest)]
        roots = [path[0] for path in iter_paths(forest)]
        assert [s.sku_id for s in skus] == [leaf.offer_id for leaf in leaves]
        assert all(s.sku_id != root.offer_id for s, root in zip(skus, roots))

    def test_base_fields(self, color_size_axes: list[VariationAxis]) -> None:
        skus = flatten_to_skus(build_forest(color_size_axes), "p1", "Tee")
        for sku in skus:
            assert sku.original_product_id == "p1"
            assert sku.price == 0
            assert sku.old_price == 0
            assert sku.price_text == ""
            assert sku.installment is None
            assert sku.images == ()
            assert len(sku.ean) == 13 and sku.ean.isdigit()
            assert len(sku.specs) == 1

    def test_spec_chain_follows_path(self, color_size_axes: list[VariationAxis]) -> None:
        forest = build_forest(color_size_axes)
        sku = flatten_to_skus(forest, "p1", "Tee")[1]

        chain = sku.spec
        assert isinstance(chain, SpecChain)
        assert (chain.type, chain.label) == ("color", "red")
        assert chain.offer_id == forest[0].offer_id
        assert isinstance(chain.next, SpecLeaf)
        assert (chain.next.type, chain.next.label) == ("size", "M")
        assert chain.leaf().offer_id == sku.sku_id
        assert [n.label for n in chain.nodes()] == ["red", "M"]

    def test_three_axes(self) -> None:
        axes = [
            VariationAxis(type="color", values=("red",)),
            VariationAxis(type="size", values=("S", "M")),
            VariationAxis(type="fit", values=("slim", "loose")),
        ]
        skus = flatten_to_skus(build_forest(axes), "p1", "Jeans")
        assert [s.name for s in skus] == [
            "Jeans red S slim",
            "Jeans red S loose",
            "Jeans red M slim",
            "Jeans red M loose",
        ]
        assert len({s.sku_id for s in skus}) == 4

    def test_empty_product_name(self, color_size_axes: list[VariationAxis]) -> None:
        skus = flatten_to_skus(build_forest(color_size_axes), "p1", "")
        assert skus[0].name == "red S"

    def test_pure_for_equal_rng(self, color_size_axes: list[VariationAxis]) -> None:
        forest = build_forest(color_size_axes)
        first = flatten_to_skus(forest, "p1", "Tee", random.Random(99))
        second = flatten_to_skus(forest, "p1", "Tee", random.Random(99))
        assert first == second

    def test_rebuild_changes_sku_ids(self, color_size_axes: list[VariationAxis]) -> None:
        first = flatten_to_skus(build_forest(color_size_axes), "p1", "Tee")
        second = flatten_to_skus(build_forest(color_size_axes), "p1", "Tee")
        assert [s.name for s in first] == [s.name for s in second]
        assert {s.sku_id for s in first}.isdisjoint({s.sku_id for s in second})


class TestSkuExport:
    def test_specs_exported_as_nested_spec_nodes(self, color_size_axes: list[VariationAxis]) -> None:
        sku = flatten_to_skus(build_forest(color_size_axes), "p1", "Tee")[0]
        data = json.loads(sku.model_dump_json(by_alias=True))

        assert data["skuId"] == sku.sku_id
        assert data["originalProductId"] == "p1"
        (root,) = data["specs"]
        assert set(root) == {"id", "label", "type", "offerId", "subSpecs"}
        assert root["label"] == "red"
        (leaf,) = root["subSpecs"]
        assert leaf["label"] == "S"
        assert leaf["offerId"] == sku.sku_id
        assert leaf["subSpecs"] is None
