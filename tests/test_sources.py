"""Tests for recipe sources."""

import json

from budget_meals.errors import LLMError
from budget_meals.sources import AIRecipeSource, CatalogRecipeSource

AI_REPLY = json.dumps(
    {
        "dinners": [
            {
                "name": "Bean Tacos",
                "servings": 4,
                "ingredients": [
                    {"name": "black beans", "amount": 2, "unit": "cans", "category": "pantry"},
                    {"name": "onion", "amount": 1, "unit": "whole", "category": "produce"},
                ],
            }
        ]
    }
)


class FakeLLM:
    """Stands in for LLMClient, recording the conversation it was sent."""

    model = "fake-model"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.messages = None

    def chat(self, messages, **kwargs):
        self.messages = messages
        if self.error:
            raise self.error
        return self.reply


class TestCatalogRecipeSource:
    def test_bundled_catalog(self):
        recipes = CatalogRecipeSource().get_recipes(4, 150)
        ids = {r.id for r in recipes}
        assert "oatmeal-basic" in ids
        assert "slow-cooker-chili" in ids

    def test_custom_file_loaded_once(self, tmp_path, rice_and_beans):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([rice_and_beans.to_dict()]))
        source = CatalogRecipeSource(path)

        first = source.get_recipes(4, 100)
        path.write_text("[]")
        second = source.get_recipes(4, 100)

        assert [r.id for r in first] == [r.id for r in second] == ["rice-beans"]

    def test_returns_copy(self):
        source = CatalogRecipeSource()
        source.get_recipes(4, 100).clear()
        assert source.get_recipes(4, 100)


class TestAIRecipeSource:
    """Tests for AIRecipeSource."""

    def test_parses_reply(self):
        llm = FakeLLM(reply=AI_REPLY)
        recipes = AIRecipeSource(llm, meals_count=5).get_recipes(4, 100)

        assert [r.name for r in recipes] == ["Bean Tacos"]
        assert recipes[0].servings == 4
        assert llm.messages[0]["role"] == "system"

    def test_fenced_reply(self):
        llm = FakeLLM(reply=f"Here you go:\n```json\n{AI_REPLY}\n```")
        assert len(AIRecipeSource(llm).get_recipes(4, 100)) == 1

    def test_llm_failure_returns_empty(self):
        llm = FakeLLM(error=LLMError("Language model API error: 500"))
        assert AIRecipeSource(llm).get_recipes(4, 100) == []

    def test_unparseable_reply_returns_empty(self):
        llm = FakeLLM(reply="Sorry, I can't help with that.")
        assert AIRecipeSource(llm).get_recipes(4, 100) == []

    def test_build_prompt(self):
        source = AIRecipeSource(FakeLLM(), meals_count=7)
        prompt = source.build_prompt(4, 140, "90210", "vegetarian")

        assert "Generate 10 budget-friendly dinner recipes for a family of 4" in prompt
        assert "$140.00 ($20.00 per meal)" in prompt
        assert "ZIP 90210" in prompt
        assert "Dietary restrictions: vegetarian." in prompt

    def test_build_prompt_without_location(self):
        prompt = AIRecipeSource(FakeLLM(), meals_count=0).build_prompt(2, 50, None, None)
        assert "ZIP" not in prompt
        assert "$50.00 ($50.00 per meal)" in prompt
