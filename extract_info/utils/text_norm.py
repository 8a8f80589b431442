"""Text normalization applied to transcripts before the NLU query."""

import re

# Sentence punctuation only; commas are kept so "December, 13th" and
# "100, Montgomery St" reach the NLU service unchanged.
PUNCTUATION_RE = re.compile(r"[!?.;]")
WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_MAX_LENGTH = 500


class TextNormalizer:
    """Handles transcript cleanup and truncation."""

    @staticmethod
    def remove_punctuation(text: str) -> str:
        """Strip sentence punctuation and collapse the whitespace it leaves."""
        return TextNormalizer.collapse_whitespace(PUNCTUATION_RE.sub("", text))

    @staticmethod
    def collapse_whitespace(text: str) -> str:
        return WHITESPACE_RE.sub(" ", text).strip()

    @staticmethod
    def trim_end(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
        """Hard-truncate text to max_length characters (no word boundary check)."""
        if max_length < 0:
            raise ValueError(f"max_length must be >= 0, got: {max_length}")
        return text[:max_length] if len(text) > max_length else text

    @staticmethod
    def normalize(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
        """
        Clean a transcript for submission to the NLU service.

        Args:
            text: Raw transcript
            max_length: Maximum length of the cleaned text

        Returns:
            Cleaned and truncated text
        """
        return TextNormalizer.trim_end(
            TextNormalizer.remove_punctuation(text),
            max_length,
        )
