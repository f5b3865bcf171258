"""Exceptions raised by the retrieval and generation layers."""


class F1RAGError(Exception):
    """Base class for chatbot errors."""

    pass


class RetrievalError(F1RAGError):
    """Raised when no query variant could be retrieved."""

    pass


class GenerationError(F1RAGError):
    """Raised when the chat model is unavailable or fails."""

    pass
