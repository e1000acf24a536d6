"""Keyword extraction from a free-text question."""

from typing import List

STOP_WORDS = frozenset({
    "where", "is", "the", "how", "what", "when", "why", "does",
    "do", "in", "of", "a", "an", "to", "from", "with", "for",
    "implemented", "used", "works", "located", "defined",
    "which", "who", "are", "was", "and", "this", "that",
})

TERMINAL_PUNCTUATION = "?.,!"

MIN_KEYWORD_LENGTH = 3


def extract_keywords(question: str) -> List[str]:
    """Return the salient lowercase terms of ``question`` in first-seen order."""
    keywords: List[str] = []
    for token in question.lower().split():
        word = token.strip(TERMINAL_PUNCTUATION)
        if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS:
            continue
        if word not in keywords:
            keywords.append(word)
    return keywords
