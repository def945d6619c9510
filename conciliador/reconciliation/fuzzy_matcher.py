"""
Fuzzy supplier-name matching over extracted report text.

Presence detection uses the stricter threshold (0.70); line extraction
accepts 0.60 to tolerate line-wrap noise from PDF/spreadsheet extraction.
"""

from typing import List, Optional

import structlog

from ..config import get_settings
from ..models import MatchedLine
from ..utils.monetary import extract_monetary_values
from ..utils.text_normalizer import normalize_text, split_lines, significant_tokens

logger = structlog.get_logger()


class FuzzyLineMatcher:
    """
    Token-overlap matcher.

    A line's score is the fraction of the target's significant words
    (longer than min_token_length) that appear as whole words in the line.
    """

    def __init__(
        self,
        presence_threshold: Optional[float] = None,
        line_threshold: Optional[float] = None,
        min_token_length: Optional[int] = None,
    ):
        self.settings = get_settings()
        self.presence_threshold = (
            self.settings.presence_threshold
            if presence_threshold is None else presence_threshold
        )
        self.line_threshold = (
            self.settings.line_match_threshold
            if line_threshold is None else line_threshold
        )
        self.min_token_length = (
            self.settings.min_token_length
            if min_token_length is None else min_token_length
        )

    def target_tokens(self, target: str) -> List[str]:
        return significant_tokens(target, self.min_token_length)

    @staticmethod
    def score_line(tokens: List[str], normalized_line: str) -> float:
        """Fraction of tokens present in the line, always within [0, 1]."""
        if not tokens:
            return 0.0
        words = set(normalized_line.split())
        matched = sum(1 for token in tokens if token in words)
        return matched / len(tokens)

    def is_present(self, target: str, text: str) -> bool:
        """
        Supplier presence gate.

        Exact substring on the normalized text first, then per-line token
        scoring against the presence threshold. Names made only of short
        or generic tokens ("3M") can pass the substring test alone.
        """
        normalized_target = normalize_text(target)
        normalized_text = normalize_text(text)
        if not normalized_text:
            return False

        if normalized_target and normalized_target in normalized_text:
            return True

        tokens = self.target_tokens(target)
        if not tokens:
            return False

        for line in split_lines(text):
            normalized_line = normalize_text(line)
            if not normalized_line:
                continue
            score = self.score_line(tokens, normalized_line)
            if score >= self.presence_threshold:
                logger.debug(
                    "Supplier presence confirmed by token score",
                    target=target,
                    score=round(score, 4),
                )
                return True

        return False

    def matched_lines(self, target: str, text: str) -> List[MatchedLine]:
        """Every line scoring at or above the line threshold, with its values."""
        tokens = self.target_tokens(target)
        if not tokens or not text:
            return []

        matches = []
        for line in split_lines(text):
            normalized_line = normalize_text(line)
            if not normalized_line:
                continue
            score = self.score_line(tokens, normalized_line)
            if score < self.line_threshold:
                continue
            matches.append(MatchedLine(
                original_text=line,
                normalized_text=normalized_line,
                score=score,
                monetary_values=extract_monetary_values(line),
            ))

        return matches
