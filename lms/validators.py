import re
from typing import Optional


class CountValidator:
    """Validates numeric input typed at the CLI before it reaches the catalog."""

    _PATTERN = re.compile(r"[+-]?\d+")

    @staticmethod
    def parse_count(raw: Optional[str]) -> int:
        text = (raw or "").strip()
        if not CountValidator._PATTERN.fullmatch(text):
            raise ValueError("Please enter a valid number")
        return int(text)


class TextValidator:
    """Very basic text checks for search terms and ISBNs."""

    @staticmethod
    def is_blank(text: Optional[str]) -> bool:
        return text is None or not text.strip()

    @staticmethod
    def clean(text: Optional[str]) -> str:
        if text is None:
            return ""
        # collapse runs of whitespace typed into prompts
        return re.sub(r"\s+", " ", text).strip()
