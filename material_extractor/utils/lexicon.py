"""
Lexical matchers and text normalization.

Fixed vocabularies are compiled once at import and never mutated.
"""
import re
from typing import Set

FIBER_NAMES = (
    "cotton", "linen", "wool", "silk", "polyester", "nylon", "spandex",
    "elastane", "viscose", "rayon", "acrylic", "lyocell", "tencel", "modal",
    "cashmere", "hemp", "leather", "suede", "down", "alpaca", "mohair",
    "merino", "polyamide", "acetate", "bamboo",
)

NOISE_TERMS = (
    "save", "discount", "subscribe", "sign up", "coupon", "reward", "sale",
    "% off",
)

MATERIAL_FIELD_NAMES = frozenset({"material", "materials", "fabric", "composition"})

FIBER_PATTERN = "|".join(FIBER_NAMES)

PERCENT_RE = re.compile(r"\b\d{1,3}\s*%")
FIBER_RE = re.compile(f"({FIBER_PATTERN})", re.IGNORECASE)
EXCLUDE_RE = re.compile("|".join(re.escape(term) for term in NOISE_TERMS), re.IGNORECASE)
MATERIAL_CONCEPT_RE = re.compile("|".join(sorted(MATERIAL_FIELD_NAMES)), re.IGNORECASE)

_WHITESPACE_RE = re.compile(r"\s+")
# A run of periods (and the spaces between them) closing the string.
_TRAILING_PERIOD_RE = re.compile(r"[\s.]*\.$")


def normalize_text(text: str) -> str:
    """Collapse whitespace, trim, and drop the trailing period."""
    if not text:
        return ""
    collapsed = _WHITESPACE_RE.sub(" ", text).strip()
    return _TRAILING_PERIOD_RE.sub("", collapsed)


def has_percent(text: str) -> bool:
    return bool(text) and PERCENT_RE.search(text) is not None


def has_fiber(text: str) -> bool:
    return bool(text) and FIBER_RE.search(text) is not None


def fiber_names(text: str) -> Set[str]:
    """Distinct fiber names mentioned in the text, lowercased."""
    if not text:
        return set()
    return {match.lower() for match in FIBER_RE.findall(text)}


def is_excluded(text: str) -> bool:
    """True for marketing/promotional noise. Overrides every acceptance rule."""
    return bool(text) and EXCLUDE_RE.search(text) is not None


def is_field_name_material(name: str) -> bool:
    """Exact match of a metadata key against the material field names."""
    return isinstance(name, str) and name.strip().lower() in MATERIAL_FIELD_NAMES


def mentions_material_concept(name: str) -> bool:
    """Looser check for free-form property names ("Shell Material", "Fabric Type")."""
    return isinstance(name, str) and MATERIAL_CONCEPT_RE.search(name) is not None


def is_material_candidate(text: str) -> bool:
    return has_percent(text) and has_fiber(text) and not is_excluded(text)
