"""
Token counting for conversion prompts.

Converters check each prompt against a token ceiling before calling the model,
so an oversized unit fails on its own instead of being rejected by the
provider. Includes a tiktoken-backed counter and a configurable test double.
"""

from typing import Callable, Protocol
import tiktoken


class TokenCounter(Protocol):
    """Protocol for counting tokens in text."""

    def count(self, text: str | None) -> int:
        """Count tokens in the given text."""


class TiktokenCounter:
    """
    Production implementation of TokenCounter using tiktoken.

    Falls back to the cl100k_base encoding if the model name is not known to
    tiktoken (common for models routed through litellm providers).
    """

    def __init__(self, model_name: str = "gpt-4o"):
        try:
            self.encoder = tiktoken.encoding_for_model(model_name)
        except KeyError:
            self.encoder = tiktoken.get_encoding("cl100k_base")

    def count(self, text: str | None) -> int:
        if not text:
            return 0
        return len(self.encoder.encode(text))


class NoOpTokenCounter:
    """
    No-op implementation of TokenCounter for testing.

    Returns configurable token counts without loading any encoding.
    """

    def __init__(
        self,
        return_value: int | None = None,
        count_fn: Callable[[str | None], int] | None = None,
    ):
        """
        Args:
            return_value: If provided, always returned regardless of input.
                Takes precedence over count_fn.
            count_fn: Optional callable computing a count from the text.
        """
        self.return_value = return_value
        self.count_fn = count_fn

    def count(self, text: str | None) -> int:
        if self.return_value is not None:
            return self.return_value
        if self.count_fn is not None:
            return self.count_fn(text)
        return 0
