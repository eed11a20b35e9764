"""Text canonicalization applied before similarity scoring.

All functions are pure and total: ``None`` and empty input produce ``""``.
Normalizing an already normalized value returns it unchanged.

Punctuation removal keeps Unicode letters and digits: "Café Inc" normalizes to
"café", so accented names are compared on their full spelling.
"""

import re

_LEGAL_SUFFIXES = re.compile(r"\b(inc|llc|ltd|corp|corporation|company|co|limited)\b\.?")

# Applied in order; each replacement is whole-word only.
_STREET_ABBREVIATIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bstreet\b"), "st"),
    (re.compile(r"\bavenue\b"), "ave"),
    (re.compile(r"\broad\b"), "rd"),
    (re.compile(r"\bdrive\b"), "dr"),
    (re.compile(r"\bboulevard\b"), "blvd"),
    (re.compile(r"\bsuite\b"), "ste"),
)

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D")
_URL_PREFIX = re.compile(r"^https?://(www\.)?")


def _clean(text: str) -> str:
    text = _PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_name(text: str | None) -> str:
    """Canonicalize a company name.

    Lower-cases, drops legal-entity suffixes (inc, llc, ltd, corp,
    corporation, company, co, limited) with an optional trailing period,
    replaces punctuation with spaces and collapses whitespace.

    Example:
        >>> normalize_name("  XYZ Corporation ")
        'xyz'
        >>> normalize_name("Smith & Sons, Inc.")
        'smith sons'
    """
    if not text:
        return ""
    name = _LEGAL_SUFFIXES.sub("", text.lower().strip())
    return _clean(name)


def normalize_address(text: str | None) -> str:
    """Canonicalize a street address.

    Example:
        >>> normalize_address("123 Main Street, Suite 4")
        '123 main st ste 4'
    """
    if not text:
        return ""
    address = text.lower().strip()
    for pattern, abbreviation in _STREET_ABBREVIATIONS:
        address = pattern.sub(abbreviation, address)
    return _clean(address)


def normalize_phone(text: str | None) -> str:
    """Keep only the digits of a phone number."""
    if not text:
        return ""
    return _NON_DIGITS.sub("", text)


def normalize_website(text: str | None) -> str:
    """Lower-case a URL and strip its scheme and leading ``www.``."""
    if not text:
        return ""
    return _URL_PREFIX.sub("", text.lower())
