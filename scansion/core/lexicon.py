"""Word-level text handling: tokenisation and the function-word table."""

from __future__ import annotations

import re
from typing import FrozenSet, List

# Monosyllables whose stress is decided by the metrical slot they occupy.
FUNCTION_WORDS: FrozenSet[str] = frozenset(
    {
        # articles
        "a", "an", "the",
        # prepositions
        "to", "of", "in", "on", "at", "by", "for", "with", "from", "as", "o'er",
        # conjunctions
        "and", "but", "or", "nor", "so", "yet", "if", "than", "that",
        "when", "where", "while", "though", "although",
        # relative pronouns
        "which", "who", "whom", "whose",
        # personal and possessive pronouns
        "i", "you", "he", "she", "it", "we", "they",
        "me", "him", "her", "us", "them",
        "my", "your", "his", "its", "our", "their",
        "mine", "yours", "hers", "ours", "theirs",
        "thou", "thee", "thy", "thine", "ye",
        # be / have / do and modals
        "is", "are", "was", "were", "be", "been", "being", "am", "art",
        "have", "has", "had", "hath", "hast",
        "do", "does", "did", "doth", "dost",
        "shall", "will", "would", "could", "should", "may", "might", "must", "can",
        "shalt", "wilt",
        # demonstratives
        "this", "these", "those",
    }
)

_DASHES = re.compile(r"[–—]|--")
_CURLY_APOSTROPHES = re.compile(r"[‘’ʼ]")
_EDGE_PUNCTUATION = re.compile(r"^[^A-Za-z0-9]+|[^A-Za-z0-9]+$")


def _strip_token(token: str) -> str:
    return _EDGE_PUNCTUATION.sub("", token)


def tokenize_line(line: str) -> List[str]:
    """Split ``line`` into word tokens in reading order.

    Dashes separate words, hyphenated compounds are split into their parts,
    leading and trailing punctuation is dropped and internal apostrophes are
    kept (``e'er``, ``ow'st``, ``summer's``).
    """

    text = _CURLY_APOSTROPHES.sub("'", line or "")
    text = _DASHES.sub(" ", text)

    tokens: List[str] = []
    for chunk in text.split():
        for part in chunk.split("-"):
            token = _strip_token(part)
            if token and re.search(r"[A-Za-z]", token):
                tokens.append(token)
    return tokens


__all__ = ["FUNCTION_WORDS", "tokenize_line"]
