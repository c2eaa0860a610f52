"""Text processing utilities for searchable field content."""

import re
from typing import List


class TextProcessor:
    """Tokenizer shared by index building and query parsing."""

    # Runs of letters and digits; underscores and punctuation separate tokens
    token_pattern = re.compile(r"[^\W_]+")
    whitespace_pattern = re.compile(r"\s+")

    def __init__(self, case_sensitive: bool = False):
        """
        Initialize text processor.

        Args:
            case_sensitive: Keep token case instead of case-folding
        """
        self.case_sensitive = case_sensitive

    def normalize(self, text: str) -> str:
        """
        Normalize raw field or query text.

        Args:
            text: Raw text content

        Returns:
            Case-folded (unless case sensitive), whitespace-collapsed text
        """
        if not text:
            return ""

        if not self.case_sensitive:
            text = text.casefold()

        return self.whitespace_pattern.sub(" ", text).strip()

    def tokenize(self, text: str) -> List[str]:
        """
        Split text into search terms.

        No stop words are removed and no minimum length applies, so
        single-character terms are kept.

        Args:
            text: Raw text content

        Returns:
            Terms in order of appearance, duplicates included
        """
        return self.token_pattern.findall(self.normalize(text))

    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)

    @staticmethod
    def is_blank(text: str) -> bool:
        """Check whether a query is empty or whitespace only."""
        return not text or not text.strip()
