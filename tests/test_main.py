"""Tests for the click CLI."""

from __future__ import annotations

import json

from click.testing import CliRunner

from main import cli


def _generate(*args: str):
    return CliRunner().invoke(cli, ["generate", *args])


class TestGenerate:
    def test_no_axes(self) -> None:
        result = _generate("--name", "Tee", "--product-id", "p1")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["id"] == "p1"
        assert data["skus"] == []

    def test_axes(self) -> None:
        result = _generate(
            "--name", "Tee",
            "--description", "Cotton",
            "--axis", "color=red,blue",
            "--axis", "size=S,M",
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["description"] == "Cotton"
        assert [s["name"] for s in data["skus"]] == [
            "Tee red S", "Tee red M", "Tee blue S", "Tee blue M",
        ]

    def test_seed_and_stable_ids_repeat(self) -> None:
        args = ("--product-id", "p1", "--axis", "color=red,blue", "--stable-ids", "--seed", "3")
        first = _generate(*args)
        second = _generate(*args)
        assert first.exit_code == 0, first.output
        assert first.output == second.output

    def test_random_ids_differ(self) -> None:
        args = ("--product-id", "p1", "--axis", "color=red", "--random-ids", "--seed", "3")
        first = json.loads(_generate(*args).output)
        second = json.loads(_generate(*args).output)
        assert first["skus"][0]["skuId"] != second["skus"][0]["skuId"]

    def test_summary_flag(self) -> None:
        result = _generate("--axis", "color=red", "--summary")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["priceText"] == ""

    def test_bad_axis_syntax(self) -> None:
        result = _generate("--axis", "color")
        assert result.exit_code == 2
        assert "TYPE=VALUE" in result.output

    def test_duplicate_axis(self) -> None:
        result = _generate("--axis", "color=red", "--axis", "color=blue")
        assert result.exit_code == 2
        assert "already exists" in result.output

    def test_axis_without_values(self) -> None:
        result = _generate("--axis", "color=")
        assert result.exit_code == 2
        assert "at least one value" in result.output
