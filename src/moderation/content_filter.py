import logging
import re
from collections import Counter
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

BLOCKED_PHRASES = (
    "spam", "advertisement", "commercial", "buy now", "click here", "free money",
    "lottery", "winner", "urgent", "limited time", "act now", "guaranteed", "suspicious",
)

HATE_SPEECH_PATTERNS = (
    re.compile(r"\b(kill|hate|destroy)\s+(all|every)\s+\w+", re.IGNORECASE),
    re.compile(r"\b(racist|sexist|homophobic)\s+\w+", re.IGNORECASE),
)

SPAM_PATTERNS = (
    re.compile(r"(www\.|https?://)\S+", re.IGNORECASE),
    re.compile(r"\b\w+@\w+\.\w+"),
    re.compile(r"\b(\d{3}-\d{3}-\d{4}|\d{10})\b"),
)

PHRASE_PENALTY = 0.1
HATE_SPEECH_PENALTY = 0.3
SPAM_PENALTY = 0.2
REPETITION_PENALTY = 0.15
CAPITALS_PENALTY = 0.1

APPROVE_THRESHOLD = 0.9
FLAG_THRESHOLD = 0.7


class Recommendation:
    APPROVE = "APPROVE"
    FLAG = "FLAG"
    REJECT = "REJECT"


@dataclass
class ContentAnalysis:
    confidence_score: float = 1.0
    flags: list[str] = field(default_factory=list)

    @property
    def recommendation(self) -> str:
        if self.confidence_score >= APPROVE_THRESHOLD:
            return Recommendation.APPROVE
        if self.confidence_score >= FLAG_THRESHOLD:
            return Recommendation.FLAG
        return Recommendation.REJECT

    @property
    def reason(self) -> str:
        if self.recommendation == Recommendation.APPROVE:
            return "Content appears appropriate"
        if self.recommendation == Recommendation.FLAG:
            prefix = "Content may need review"
        else:
            prefix = "Content likely inappropriate"
        return f"{prefix}: {', '.join(self.flags)}"


def has_excessive_repetition(text: str) -> bool:
    """Any word longer than three characters used more than three times."""
    words = Counter(w for w in text.lower().split() if len(w) > 3)
    return any(count > 3 for count in words.values())


def has_excessive_capitals(text: str) -> bool:
    if len(text) < 10:
        return False
    letters = [ch for ch in text if ch.isalpha()]
    if not letters:
        return False
    return sum(1 for ch in letters if ch.isupper()) / len(letters) > 0.5


def analyze_content(text: str | None) -> ContentAnalysis:
    """
    Score free text between 0 and 1; every heuristic that fires lowers the score.

    Blocked phrases cost 0.1 each, a hate speech pattern 0.3, more than two
    spam indicators (links, emails, phone numbers) 0.2, repeated words 0.15
    and shouting 0.1. Scores of 0.9 and above are approved, 0.7 and above
    flagged for review, anything lower rejected.
    """
    analysis = ContentAnalysis()
    if not text or not text.strip():
        return analysis

    lowered = text.lower()
    score = 1.0
    for phrase in BLOCKED_PHRASES:
        if phrase in lowered:
            analysis.flags.append(f"Contains inappropriate word: {phrase}")
            score -= PHRASE_PENALTY

    for pattern in HATE_SPEECH_PATTERNS:
        if pattern.search(text):
            analysis.flags.append("Potential hate speech detected")
            score -= HATE_SPEECH_PENALTY

    if sum(1 for pattern in SPAM_PATTERNS if pattern.search(text)) > 2:
        analysis.flags.append("Multiple spam indicators detected")
        score -= SPAM_PENALTY

    if has_excessive_repetition(text):
        analysis.flags.append("Excessive repetition detected")
        score -= REPETITION_PENALTY

    if has_excessive_capitals(text):
        analysis.flags.append("Excessive capitalization detected")
        score -= CAPITALS_PENALTY

    # two decimals keeps threshold comparisons away from float drift
    analysis.confidence_score = round(min(1.0, max(0.0, score)), 2)
    log.debug("Content analysis score=%s flags=%s", analysis.confidence_score, analysis.flags)
    return analysis
