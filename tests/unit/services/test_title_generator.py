"""
Unit Tests for conversation title generation
"""
import pytest

from vibecoding.core.config import settings
from vibecoding.services.title_generator import DEFAULT_TITLE, clean_title, generate_conversation_title


class TestCleanTitle:
    """Test title normalization"""

    def test_short_title_kept(self):
        assert clean_title("Snake game", "make a snake game", 15) == "Snake game"

    def test_surrounding_quotes_removed(self):
        assert clean_title('"Todo app"', "todo", 15) == "Todo app"
        assert clean_title("「贪吃蛇」", "snake", 15) == "贪吃蛇"

    def test_truncated_at_space_after_position_10(self):
        assert clean_title("Recipe manager app", "x", 15) == "Recipe manager"

    def test_hard_truncation_without_late_space(self):
        assert clean_title("Supercalifragilistic", "x", 15) == "Supercalifragil"
        assert clean_title("Weather dashboard with charts", "x", 15) == "Weather dashboa"

    def test_too_short_falls_back_to_message(self):
        assert clean_title("A", "build me a calculator please", 15) == "build me a calc"

    def test_empty_everything_falls_back_to_default(self):
        assert clean_title("", "   ", 15) == DEFAULT_TITLE

    def test_result_never_exceeds_limit(self):
        for raw in ["x" * 40, "word " * 10, '"' + "y" * 30 + '"']:
            assert len(clean_title(raw, "message", 15)) <= 15


class TestGenerateConversationTitle:
    """Test the LLM-backed title call"""

    @pytest.mark.asyncio
    async def test_uses_model_answer(self, mock_llm):
        mock_llm.set_response("Snake Game")

        title = await generate_conversation_title("Please write a snake game in JS", client=mock_llm)

        assert title == "Snake Game"
        assert mock_llm.last_max_tokens == settings.LLM_TITLE_MAX_TOKENS
        assert "snake game" in mock_llm.last_messages[-1]["content"]

    @pytest.mark.asyncio
    async def test_empty_answer_uses_message(self, mock_llm):
        mock_llm.set_response("")

        title = await generate_conversation_title("Todo list", client=mock_llm)
        assert title == "Todo list"
