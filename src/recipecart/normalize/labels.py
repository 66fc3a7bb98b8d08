"""Ingredient label normalization used to group shopping-list lines."""

import re

# Words that are the same in singular and plural
UNCOUNTABLE_NOUNS = frozenset(
    {
        "fish",
        "sheep",
        "deer",
        "money",
        "rice",
        "bread",
        "water",
        "salt",
        "sugar",
        "flour",
    }
)

# Plurals the suffix rules get wrong
IRREGULAR_PLURALS: dict[str, str] = {
    "tomatoes": "tomato",
    "potatoes": "potato",
    "mangoes": "mango",
    "olives": "olive",
    "cloves": "clove",
    "chives": "chive",
    "cookies": "cookie",
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
    "wolves": "wolf",
    "children": "child",
    "people": "person",
    "geese": "goose",
    "mice": "mouse",
    "teeth": "tooth",
    "feet": "foot",
    "indices": "index",
    "cacti": "cactus",
    "fungi": "fungus",
}

_IRREGULAR_SINGULARS = frozenset(IRREGULAR_PLURALS.values())

_SIBILANT_SUFFIXES = ("ches", "shes", "sses", "xes", "zes")

_WORD_PATTERN = re.compile(r"[a-z]+")


def _apply_suffix_rules(word: str) -> str:
    if len(word) <= 3:
        return word
    if word.endswith("ies"):
        return word[:-3] + "y"  # berries -> berry
    if word.endswith("ves"):
        return word[:-3] + "f"
    if word.endswith(_SIBILANT_SUFFIXES):
        return word[:-2]  # peaches -> peach
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def singularize(word: str) -> str:
    """
    Singularize one lower-case token.

    Only tokens made of ``a-z`` are touched; anything with digits, punctuation
    or capitals is returned as is.
    """
    if not _WORD_PATTERN.fullmatch(word):
        return word
    if word in UNCOUNTABLE_NOUNS or word in _IRREGULAR_SINGULARS:
        return word
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]

    singular = _apply_suffix_rules(word)
    # "cactis" -> "cacti" still needs the irregular mapping
    return IRREGULAR_PLURALS.get(singular, singular)


def normalize_label(value: str) -> str:
    """
    Normalize an ingredient label for grouping.

    - Lowercase
    - Collapse whitespace
    - Singularize each word ("Cherry Tomatoes" -> "cherry tomato")
    """
    if not value:
        return ""

    return " ".join(singularize(token) for token in value.lower().split())
