from typing import Iterable, Optional, Sequence
import re

CLOSING_PHRASES: Sequence[str] = (
    "that's all",
    "that is all",
    "end the call",
    "finish the quotation",
    "save it",
    "we're done",
    "goodbye",
    "bye",
)

_NEGATIONS = ("not", "don't", "do not", "dont", "never", "no")


def _normalize(text: str) -> str:
    text = text.lower().replace("’", "'")
    return re.sub(r"\s+", " ", text).strip()


class EndOfCallDetector:
    """Spots the user wrapping up the session in final transcripts. Fires once."""

    def __init__(self, phrases: Optional[Iterable[str]] = None) -> None:
        self.phrases = [_normalize(p) for p in (phrases or CLOSING_PHRASES)]
        self._patterns = [
            re.compile(r"(?<![\w'])" + re.escape(p) + r"(?![\w'])") for p in self.phrases
        ]
        self._negated = re.compile(
            r"\b(?:" + "|".join(re.escape(n) for n in _NEGATIONS) + r")\s+(?:\w+\s+)?(?:done|end|finish|save)\b"
        )
        self.triggered = False

    def matches(self, text: str) -> bool:
        normalized = _normalize(text)
        if not normalized or self._negated.search(normalized):
            return False
        return any(p.search(normalized) for p in self._patterns)

    def check(self, text: str) -> bool:
        if self.triggered:
            return False
        if self.matches(text):
            self.triggered = True
            return True
        return False

    def reset(self) -> None:
        self.triggered = False
