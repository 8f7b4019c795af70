"""Slug derivation for category and product names."""

import re
import unicodedata

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

# Symbols spelled out as words: "Fruits & Vegetables" -> "fruits-and-vegetables"
_SYMBOL_WORDS = {
    "&": "and",
    "$": "dollar",
    "%": "percent",
    "<": "less",
    ">": "greater",
    "|": "or",
    "¢": "cent",
    "£": "pound",
    "¥": "yen",
    "€": "euro",
    "₹": "indian rupee",
    "©": "c",
    "®": "r",
    "∞": "infinity",
    "♥": "love",
}

# Stripped outright rather than turned into separators: "Ben's" -> "bens"
_REMOVED_CHARS = re.compile(r"""[*+~.()'"!:@]""")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(value: str) -> str:
    """Turn a display name into a lowercase, hyphenated, URL-safe slug.

    A few symbols are spelled out (``&`` becomes "and", ``%`` "percent"),
    accented letters are folded to ASCII, the punctuation set
    ``*+~.()'"!:@`` is removed, any other symbol is dropped and runs of
    whitespace, underscores or hyphens collapse into a single hyphen.
    ``slugify(slugify(x)) == slugify(x)`` for every input.
    """
    text = "".join(_SYMBOL_WORDS.get(char, char) for char in value)
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = _REMOVED_CHARS.sub("", text.lower())
    text = _NON_SLUG_CHARS.sub(" ", text)
    return _SEPARATORS.sub("-", text).strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value))
