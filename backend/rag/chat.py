"""
Chat Service

Answers F1 questions: hybrid retrieval -> context formatting -> prompt ->
chat model. Retrieval problems never abort a chat; the answer falls back
to general knowledge with the no-context sentinel in the prompt.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable

from observability import span
from rag.context import NO_CONTEXT_AVAILABLE, build_source_references, format_context
from rag.exceptions import GenerationError
from rag.llm import LLMRouter
from rag.prompts import RAG_PROMPT
from rag.retriever import DocumentRetriever
from rag.schemas import RetrievalResult, SourceReference

logger = logging.getLogger(__name__)


@dataclass
class ChatAnswer:
    """A complete answer with the documents it was grounded on."""
    answer: str
    sources: list[SourceReference] = field(default_factory=list)


def to_langchain_messages(history: list[Any] | None) -> list[BaseMessage]:
    """
    Convert {"role", "content"} turns into LangChain messages.

    "user" turns become HumanMessage; every other role becomes AIMessage.
    """
    messages: list[BaseMessage] = []
    for turn in history or []:
        if isinstance(turn, Mapping):
            role, content = turn.get("role"), turn.get("content", "")
        else:
            role, content = turn.role, turn.content
        if role == "user":
            messages.append(HumanMessage(content=content))
        else:
            messages.append(AIMessage(content=content))
    return messages


class ChatService:
    """Retrieval-augmented F1 chat."""

    def __init__(
        self,
        retriever: DocumentRetriever,
        llm_router: LLMRouter,
        retrieval_limit: int = 5,
    ):
        self.retriever = retriever
        self.llm_router = llm_router
        self.retrieval_limit = retrieval_limit

    async def build_context(self, question: str) -> tuple[str, RetrievalResult | None]:
        """
        Retrieve documents for a question and format them as prompt context.

        Returns:
            (context text, retrieval result); the result is None when
            retrieval failed and the fallback context is used
        """
        try:
            result = await self.retriever.hybrid_retrieve(question, self.retrieval_limit)
        except Exception as e:
            logger.warning(f"Retrieval failed, answering without context: {e}")
            return NO_CONTEXT_AVAILABLE, None

        logger.info(f"Retrieved {len(result)} documents for context")
        return format_context(result.documents), result

    def _build_chain(self) -> Runnable:
        return RAG_PROMPT | self.llm_router.get_llm() | StrOutputParser()

    async def answer(
        self,
        question: str,
        history: list[Any] | None = None,
    ) -> ChatAnswer:
        """Generate a complete answer with source citations."""
        context, result = await self.build_context(question)
        chain = self._build_chain()

        try:
            with span("llm.invoke", "Generate answer", {"documents": len(result or [])}):
                text = await chain.ainvoke(
                    {
                        "context": context,
                        "chat_history": to_langchain_messages(history),
                        "question": question,
                    }
                )
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e

        return ChatAnswer(answer=text, sources=build_source_references(result))

    async def stream(
        self,
        question: str,
        history: list[Any] | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream answer text fragments.

        Closing this iterator closes the upstream model stream, so a
        client disconnect stops generation.
        """
        context, _ = await self.build_context(question)
        chain = self._build_chain()
        inputs = {
            "context": context,
            "chat_history": to_langchain_messages(history),
            "question": question,
        }

        try:
            async with aclosing(chain.astream(inputs)) as fragments:
                async for fragment in fragments:
                    if fragment:
                        yield fragment
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e
