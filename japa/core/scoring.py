"""Accuracy scoring and next-word suggestions for mantra typing.

Scoring runs on every keystroke and follows three stages:

  * **Exact** – the normalized, auto-corrected input equals the normalized
    target: 100.
  * **Tolerant** – the input (spaces removed) is at least 80% as long as the
    target and at least 85% of the target's characters match at the same
    position: 100.  This is a positional comparison, not an edit distance,
    so one inserted character early on shifts everything after it.
  * **Partial** – otherwise the share of index-aligned matching words,
    floored to a whole percentage.  Only a 100 counts as a repetition.
"""

from __future__ import annotations

import re

from japa.core.mantras import Variant

SENTENCE_TERMINATORS = "।॥"
LENGTH_RATIO_THRESHOLD = 0.8
SIMILARITY_THRESHOLD = 85.0

_TERMINATOR_RE = re.compile(f"[{SENTENCE_TERMINATORS}]")
_OPENING_ALIAS_RE = re.compile(r"\b(?:om|aum)\b", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Drop sentence terminators, lowercase and trim."""
    return _TERMINATOR_RE.sub("", text).lower().strip()


def auto_correct(text: str, variant: Variant) -> str:
    """Rewrite whole-word om/aum (any case) to the variant's opening token."""
    return _OPENING_ALIAS_RE.sub(variant.opening_token, text)


def _strip_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)


def positional_similarity(typed: str, target: str) -> float:
    """Percentage of target characters matched at the same index.

    Divides by the target length, not the overlap, so a short but correct
    prefix of a long target scores low.
    """
    if not target:
        return 0.0
    matches = sum(1 for a, b in zip(target, typed) if a == b)
    return matches * 100.0 / len(target)


def word_accuracy(typed: str, target: str) -> int:
    """Floor percentage of target words matched at the same index."""
    target_words = target.split(" ")
    typed_words = typed.split(" ")
    correct = sum(1 for a, b in zip(target_words, typed_words) if a == b)
    return correct * 100 // len(target_words)


def score(live_input: str, target: str, variant: Variant) -> int:
    """Return typing accuracy of *live_input* against *target* in [0, 100]."""
    normalized_target = normalize(target)
    if not normalized_target:
        raise ValueError("target text must not be empty")
    normalized_input = normalize(auto_correct(live_input, variant))

    if normalized_input == normalized_target:
        return 100

    target_chars = _strip_whitespace(normalized_target)
    input_chars = _strip_whitespace(normalized_input)
    if len(input_chars) >= len(target_chars) * LENGTH_RATIO_THRESHOLD:
        if positional_similarity(input_chars, target_chars) >= SIMILARITY_THRESHOLD:
            return 100

    return word_accuracy(normalized_input, normalized_target)


def suggest(live_input: str, target: str) -> str:
    """Return the full target word the user is typing, or "" if none fits.

    Empty input suggests the first word.  Input ending in a space means a new
    word is being started, so the next target word is suggested; this is what
    lets accepted suggestions chain through the whole text.
    """
    target_words = target.strip().split(" ")
    trimmed = live_input.strip()
    if not trimmed:
        return target_words[0]

    typed_words = trimmed.split(" ")
    if live_input != live_input.rstrip():
        index = len(typed_words)
        return target_words[index] if index < len(target_words) else ""

    index = len(typed_words) - 1
    if index >= len(target_words):
        return ""
    candidate = target_words[index]
    if normalize(candidate).startswith(normalize(typed_words[-1])):
        return candidate
    return ""


def accept_suggestion(live_input: str, suggestion: str) -> str:
    """Replace the last space-delimited token with *suggestion* plus a space."""
    if not suggestion:
        return live_input
    tokens = live_input.split(" ")
    tokens[-1] = suggestion
    return " ".join(tokens) + " "


class MantraScorer:
    """Scorer bound to one target text and language variant."""

    def __init__(self, target: str, variant: Variant) -> None:
        if not normalize(target):
            raise ValueError("target text must not be empty")
        self._target = target
        self._variant = variant

    @property
    def target(self) -> str:
        return self._target

    @property
    def variant(self) -> Variant:
        return self._variant

    def score(self, live_input: str) -> int:
        return score(live_input, self._target, self._variant)

    def suggest(self, live_input: str) -> str:
        return suggest(live_input, self._target)

    def accept(self, live_input: str) -> str:
        """Accept the current suggestion and return the new input text."""
        return accept_suggestion(live_input, self.suggest(live_input))
