"""
Answer generator.

Phrases an answer to the student's question from the ranked passages using
a LangChain chat model (Gemini by default).

Dependencies: langchain_core, langchain_google_genai
System role: Answer synthesis after retrieval
"""

import logging
from typing import Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI

from learnability.boundary.vdb.vector_schemas import VectorSearchResult
from learnability.configs.retrieval import AnswerSettings
from learnability.core.answering.tutor_prompt import TUTOR_PROMPT

logger = logging.getLogger(__name__)


def format_context(passages: Sequence[VectorSearchResult]) -> str:
    """Join passages into the prompt's context block, best match first."""
    return "\n\n---\n\n".join(passage.text for passage in passages)


class AnswerGenerator:
    """Generate a tutor-style answer grounded in retrieved passages."""

    def __init__(self, model: BaseChatModel) -> None:
        self._chain = TUTOR_PROMPT | model | StrOutputParser()

    @classmethod
    def from_settings(cls, settings: AnswerSettings) -> "AnswerGenerator":
        kwargs = {}
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        model = ChatGoogleGenerativeAI(
            model=settings.model,
            temperature=settings.temperature,
            **kwargs,
        )
        logger.info(f"{__name__}:from_settings - Initialized answer model {settings.model}")
        return cls(model)

    async def generate(self, question: str, passages: Sequence[VectorSearchResult]) -> str:
        """
        Answer a question from passages.

        Args:
            question: User question
            passages: Ranked passages (must not be empty)

        Returns:
            str: Answer text
        """
        answer = await self._chain.ainvoke({
            "context": format_context(passages),
            "question": question,
        })
        logger.info(
            f"{__name__}:generate - Generated answer",
            extra={"passage_count": len(passages), "answer_length": len(answer)},
        )
        return answer
