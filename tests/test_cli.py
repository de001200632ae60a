"""Tests for the CLI module."""

import json

import pytest

from budget_meals import __version__
from budget_meals.cli import cli
from budget_meals.errors import LLMError


@pytest.fixture(autouse=True)
def offline_env(monkeypatch):
    """Keep CLI runs offline and independent of the developer's environment."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("BUDGET_MEALS_CATALOG", raising=False)
    monkeypatch.setenv("BUDGET_MEALS_LIVE_PRICING", "0")


@pytest.fixture
def catalog_file(tmp_path, sample_recipes):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"dinner": [r.to_dict() for r in sample_recipes]}))
    return path


class TestCliGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "plan" in result.output
        assert "price" in result.output


# ============================================================================
# Plan Command Tests
# ============================================================================


class TestPlanCommand:
    """Tests for the plan command."""

    def test_family_week(self, runner):
        result = runner.invoke(
            cli, ["plan", "--budget", "150", "--adults", "2", "--kids", "2", "--kid-ages", "4,8"]
        )

        assert result.exit_code == 0, result.output
        assert "MEAL PLAN" in result.output
        assert "SHOPPING LIST" in result.output
        assert "Meals: 7" in result.output

    def test_json_output(self, runner, catalog_file):
        result = runner.invoke(
            cli, ["plan", "-b", "100", "-m", "2", "--catalog", str(catalog_file), "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["meals"]) == 2
        assert data["budget"] == 100

    def test_allergies(self, runner, catalog_file):
        result = runner.invoke(
            cli,
            ["plan", "-b", "100", "-m", "3", "--catalog", str(catalog_file)]
            + ["--allergies", "dairy, peanut", "--json"],
        )

        data = json.loads(result.output)
        assert [meal["id"] for meal in data["meals"]] == ["rice-beans"]

    def test_invalid_budget(self, runner):
        result = runner.invoke(cli, ["plan", "--budget", "5"])
        assert result.exit_code == 1
        assert "✗" in result.output
        assert "at least" in result.output

    def test_invalid_zip(self, runner):
        result = runner.invoke(cli, ["plan", "--budget", "100", "--zip", "123"])
        assert result.exit_code == 1
        assert "ZIP" in result.output

    def test_bad_kid_ages(self, runner):
        result = runner.invoke(cli, ["plan", "-b", "100", "-k", "1", "--kid-ages", "four"])
        assert result.exit_code == 1
        assert "Invalid kid age" in result.output

    def test_everything_filtered(self, runner, catalog_file):
        result = runner.invoke(
            cli,
            ["plan", "-b", "100", "--catalog", str(catalog_file)]
            + ["--allergies", "dairy, peanut, rice"],
        )
        assert result.exit_code == 1
        assert "No recipes are available" in result.output

    def test_ai_requires_key(self, runner):
        result = runner.invoke(cli, ["plan", "-b", "100", "--ai"])
        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_ai_client_closed(self, runner, monkeypatch):
        clients = []

        class OfflineLLMClient:
            model = "offline"

            def __init__(self, api_key, model, timeout=None):
                self.closed = False
                clients.append(self)

            def chat(self, messages, **kwargs):
                raise LLMError("Language model request failed: offline")

            def close(self):
                self.closed = True

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self.close()

        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr("budget_meals.cli.LLMClient", OfflineLLMClient)

        result = runner.invoke(cli, ["plan", "-b", "100", "--ai"])

        assert result.exit_code == 1
        assert "No recipes are available" in result.output
        assert len(clients) == 1
        assert clients[0].closed

    def test_regenerate(self, runner, catalog_file):
        result = runner.invoke(
            cli, ["plan", "-b", "100", "-m", "2", "--catalog", str(catalog_file), "-r", "1"]
        )
        assert result.exit_code == 0, result.output
        assert "↻ Meal 1 is now" in result.output

    def test_regenerate_out_of_range(self, runner, catalog_file):
        result = runner.invoke(
            cli, ["plan", "-b", "100", "-m", "2", "--catalog", str(catalog_file), "-r", "9"]
        )
        assert result.exit_code == 0
        assert "Could not regenerate meal 9" in result.output

    @pytest.mark.parametrize("suffix", [".json", ".csv", ".md"])
    def test_export(self, runner, catalog_file, tmp_path, suffix):
        output = tmp_path / f"plan{suffix}"
        result = runner.invoke(
            cli, ["plan", "-b", "100", "--catalog", str(catalog_file), "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "✓ Exported" in result.output

    def test_export_bad_extension(self, runner, catalog_file, tmp_path):
        result = runner.invoke(
            cli,
            ["plan", "-b", "100", "--catalog", str(catalog_file), "-o", str(tmp_path / "x.pdf")],
        )
        assert result.exit_code == 1
        assert "Export failed" in result.output


# ============================================================================
# Pricing & Catalog Command Tests
# ============================================================================


class TestPriceCommand:
    def test_price_milk(self, runner):
        result = runner.invoke(cli, ["price", "milk", "2", "cups"])
        assert result.exit_code == 0, result.output
        assert "$0.46" in result.output
        assert "base_table" in result.output

    def test_price_with_location(self, runner):
        result = runner.invoke(cli, ["price", "ground beef", "1", "lbs", "--location", "TX"])
        assert result.exit_code == 0
        assert "regional_estimate" in result.output

    def test_non_positive_amount(self, runner):
        result = runner.invoke(cli, ["price", "milk", "0", "cups"])
        assert result.exit_code == 1


class TestCatalogCommand:
    def test_lists_bundled(self, runner):
        result = runner.invoke(cli, ["catalog"])
        assert result.exit_code == 0
        assert "oatmeal-basic" in result.output
        assert "recipes" in result.output

    def test_allergy_filter(self, runner, catalog_file):
        result = runner.invoke(
            cli, ["catalog", "--catalog", str(catalog_file), "--allergies", "dairy, peanut"]
        )
        assert result.exit_code == 0
        assert "1 of 3 recipes" in result.output

    def test_invalid_catalog(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json")
        result = runner.invoke(cli, ["catalog", "--catalog", str(path)])
        assert result.exit_code == 1
        assert "✗" in result.output
