"""Text normalization for food names.

Lowercases, strips filler qualifiers, tokenizes on whitespace and CJK/Latin
punctuation and extracts the keyword set used by query building and scoring.
"""

import re
from typing import Iterable, List, Sequence, Tuple

from .models import FoodItem, NormalizedText


# Qualifiers that describe presentation, not product identity
FILLER_QUALIFIERS: Tuple[str, ...] = (
    "新鲜", "有机", "进口", "散装", "包装",
    "fresh", "organic", "imported", "loose", "packaged",
)

# Whitespace plus ideographic space, 、 。 ， ： ； ？ ！ 《 》
TOKEN_DELIMITERS = re.compile(
    r"[\s　、。，：；？！《》]+"
)

_FILLER_PATTERN = re.compile("|".join(re.escape(word) for word in FILLER_QUALIFIERS))
_WHITESPACE = re.compile(r"\s+")

MIN_KEYWORD_LENGTH = 2


def strip_fillers(text: str) -> str:
    """Lowercase text and remove filler qualifiers.

    Whitespace left behind by a removal is collapsed and the result trimmed.
    """
    lowered = text.lower().strip()
    stripped = _FILLER_PATTERN.sub("", lowered)
    return _WHITESPACE.sub(" ", stripped).strip()


def tokenize(text: str) -> List[str]:
    """Split text on whitespace and punctuation delimiters, dropping empties."""
    return [token.strip() for token in TOKEN_DELIMITERS.split(text) if token.strip()]


def extract_keywords(tokens: Iterable[str], aliases: Sequence[str] = ()) -> Tuple[str, ...]:
    """Collect tokens of length >= 2 from the name and from every alias.

    Duplicates collapse; first-seen order is kept.
    """
    keywords = {}
    for token in tokens:
        if len(token) >= MIN_KEYWORD_LENGTH:
            keywords.setdefault(token, None)

    for alias in aliases:
        for token in tokenize(alias.lower()):
            if len(token) >= MIN_KEYWORD_LENGTH:
                keywords.setdefault(token, None)

    return tuple(keywords)


def normalize_food(food: FoodItem) -> NormalizedText:
    """Normalize a food item's name and aliases."""
    normalized = strip_fillers(food.name)
    tokens = tokenize(normalized)
    return NormalizedText(
        original=food.name,
        normalized=normalized,
        tokens=tuple(tokens),
        keywords=extract_keywords(tokens, food.aliases),
    )
