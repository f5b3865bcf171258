"""
LLM Router

Selects the chat model: Gemini (primary) -> Groq -> DeepSeek.
The first provider with credentials wins unless a preferred provider is
configured. Generation errors are not retried and do not fail over.
"""

import logging
from enum import Enum

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI  # DeepSeek uses OpenAI-compatible API

from rag.config import Settings
from rag.exceptions import GenerationError

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    """Available LLM providers."""

    GEMINI = "gemini"
    GROQ = "groq"
    DEEPSEEK = "deepseek"


PRIORITY_ORDER = [LLMProvider.GEMINI, LLMProvider.GROQ, LLMProvider.DEEPSEEK]


class LLMRouter:
    """Holds the configured chat models and picks one per request."""

    def __init__(self, settings: Settings | None = None):
        """Initialize the LLM router."""
        self.settings = settings or Settings()
        self._providers: dict[LLMProvider, BaseChatModel] = {}
        self._preferred = self._parse_provider(self.settings.llm_provider)
        self._initialize_providers()
        self._current_provider: LLMProvider | None = None

    @staticmethod
    def _parse_provider(name: str | None) -> LLMProvider | None:
        if not name:
            return None
        try:
            return LLMProvider(name.lower())
        except ValueError:
            logger.warning(f"Unknown LLM_PROVIDER '{name}', using priority order")
            return None

    def _initialize_providers(self):
        """Initialize providers that have credentials."""
        s = self.settings

        if s.google_api_key:
            try:
                self._providers[LLMProvider.GEMINI] = ChatGoogleGenerativeAI(
                    google_api_key=s.google_api_key,
                    model=s.google_model,
                    temperature=s.llm_temperature,
                    max_output_tokens=s.llm_max_tokens,
                )
                logger.info(f"Gemini initialized with model {s.google_model}")
            except Exception as e:
                logger.warning(f"Failed to initialize Gemini: {e}")
        else:
            logger.info("Google API key not provided, skipping Gemini")

        if s.groq_api_key:
            try:
                self._providers[LLMProvider.GROQ] = ChatGroq(
                    api_key=s.groq_api_key,
                    model=s.groq_model,
                    temperature=s.llm_temperature,
                    max_tokens=s.llm_max_tokens,
                )
                logger.info(f"Groq initialized with model {s.groq_model}")
            except Exception as e:
                logger.warning(f"Failed to initialize Groq: {e}")
        else:
            logger.info("Groq API key not provided, skipping")

        if s.deepseek_api_key:
            try:
                self._providers[LLMProvider.DEEPSEEK] = ChatOpenAI(
                    api_key=s.deepseek_api_key,
                    base_url=s.deepseek_base_url,
                    model=s.deepseek_model,
                    temperature=s.llm_temperature,
                    max_tokens=s.llm_max_tokens,
                )
                logger.info(f"DeepSeek initialized with model {s.deepseek_model}")
            except Exception as e:
                logger.warning(f"Failed to initialize DeepSeek: {e}")
        else:
            logger.info("DeepSeek API key not provided, skipping")

    def get_available_providers(self) -> list[LLMProvider]:
        """Get configured providers in priority order."""
        return [p for p in PRIORITY_ORDER if p in self._providers]

    def get_llm(self, provider: LLMProvider | None = None) -> BaseChatModel:
        """
        Get a chat model.

        Args:
            provider: Specific provider to use, or None for auto-selection

        Returns:
            Chat model instance

        Raises:
            GenerationError: If no provider is configured
        """
        provider = provider or self._preferred
        if provider and provider in self._providers:
            self._current_provider = provider
            return self._providers[provider]

        for p in self.get_available_providers():
            self._current_provider = p
            return self._providers[p]

        raise GenerationError(
            "No LLM provider configured (set GOOGLE_API_KEY, GROQ_API_KEY or DEEPSEEK_API_KEY)"
        )

    @property
    def current_provider(self) -> LLMProvider | None:
        """Get the most recently selected provider."""
        return self._current_provider
