"""
Tests for the tutor prompt and AnswerGenerator.

System role: Verification of answer synthesis from retrieved passages
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from learnability.boundary.vdb.vector_schemas import VectorSearchResult
from learnability.core.answering.answer_generator import AnswerGenerator, format_context
from learnability.core.answering.tutor_prompt import SYSTEM_PROMPT, TUTOR_PROMPT


def passage(text: str, score: float) -> VectorSearchResult:
    return VectorSearchResult(text=text, score=score, document_id="doc-1", chunk_index=0)


class TestTutorPrompt:
    def test_prompt_contains_context_and_question(self) -> None:
        """Should render the system instructions, context and question."""
        messages = TUTOR_PROMPT.format_messages(context="Water boils at 100C.", question="When does water boil?")

        assert messages[0].content == SYSTEM_PROMPT
        assert "Water boils at 100C." in messages[1].content
        assert messages[1].content.endswith("Question: When does water boil?")


class TestFormatContext:
    def test_joins_passages_in_rank_order(self) -> None:
        context = format_context([passage("first", 0.9), passage("second", 0.5)])

        assert context == "first\n\n---\n\nsecond"


class TestAnswerGenerator:
    @pytest.mark.asyncio
    async def test_generate_returns_model_text(self) -> None:
        """Should run prompt -> model -> string parser."""
        generator = AnswerGenerator(FakeListChatModel(responses=["Water boils at 100 degrees Celsius."]))

        answer = await generator.generate("When does water boil?", [passage("Water boils at 100C.", 0.8)])

        assert answer == "Water boils at 100 degrees Celsius."
