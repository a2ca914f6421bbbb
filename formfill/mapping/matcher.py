from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..models.results import MatchResult, MatchStrategy
from ..models.template_field import TemplateField

"""Template field -> data column auto-mapper.

For every template field without a mapping the matcher tries, in order:

1. the concept pattern table: the field name is tested against each concept's
   synonyms (containment either way); on a hit the columns are searched for
   one that looks like the same concept. The first concept that yields a
   column wins.
2. a direct comparison of the names with ``_``, spaces and ``-`` removed
   (containment either way).

Ties go to the first column in enumeration order. The result is a proposal
for a human to review; existing non-empty entries are never replaced.
"""

__all__ = [
    "FIELD_PATTERNS",
    "auto_map",
    "match_field",
]

logger = logging.getLogger(__name__)

# Concept key -> lowercase synonyms, most specific concepts first
FIELD_PATTERNS: dict[str, tuple[str, ...]] = {
    "firstName": ("first name", "firstname", "first_name", "fname", "given name"),
    "lastName": ("last name", "lastname", "last_name", "lname", "surname", "family name"),
    "middleName": ("middle name", "middlename", "middle initial"),
    "name": ("full name", "provider name", "name"),
    "email": ("email", "e-mail", "email address"),
    "fax": ("fax",),
    "phone": ("phone", "telephone", "mobile", "cell"),
    "npi": ("npi", "national provider"),
    "dea": ("dea number", "dea"),
    "caqh": ("caqh",),
    "license": ("license number", "license", "licence"),
    "taxonomy": ("taxonomy",),
    "specialty": ("specialty", "speciality"),
    "ssn": ("ssn", "social security"),
    "dob": ("date of birth", "dob", "birth date", "birthdate"),
    "address": ("street address", "address", "street"),
    "city": ("city",),
    "state": ("state", "province"),
    "zip": ("zip code", "zip", "postal code", "postal"),
    "credentials": ("credentials", "credential", "degree"),
}


def _contains_either(a: str, b: str) -> bool:
    return a in b or b in a


def _column_matches(column: str, synonym: str, concept: str, synonyms: tuple[str, ...]) -> bool:
    return (
        column == synonym
        or column == concept
        or _contains_either(column, synonym)
        or _contains_either(column, concept)
        or any(s in column for s in synonyms)
    )


def _pattern_match(field: str, columns: list[tuple[str, str]]) -> MatchResult | None:
    for concept, synonyms in FIELD_PATTERNS.items():
        concept_key = concept.lower()
        for synonym in synonyms:
            if not _contains_either(field, synonym):
                continue
            for original, lowered in columns:
                if _column_matches(lowered, synonym, concept_key, synonyms):
                    return MatchResult(column=original, strategy=MatchStrategy.PATTERN, concept=concept)
    return None


def _squash(value: str) -> str:
    return value.replace("_", "").replace(" ", "").replace("-", "")


def _direct_match(field: str, columns: list[tuple[str, str]]) -> MatchResult | None:
    squashed_field = _squash(field)
    for original, lowered in columns:
        squashed = _squash(lowered)
        if lowered == field or (
            squashed and squashed_field and _contains_either(squashed_field, squashed)
        ):
            return MatchResult(column=original, strategy=MatchStrategy.DIRECT)
    return None


def _prepare_columns(columns: Iterable[str]) -> list[tuple[str, str]]:
    prepared = []
    for column in columns:
        lowered = column.strip().lower()
        if lowered:
            prepared.append((column, lowered))
    return prepared


def match_field(field_name: str, columns: Iterable[str]) -> MatchResult:
    """Propose a column for one template field.

    Returns a MatchResult whose ``column`` is None when nothing matched.
    """
    field = field_name.strip().lower()
    if not field:
        return MatchResult(column=None)
    prepared = _prepare_columns(columns)
    return (
        _pattern_match(field, prepared)
        or _direct_match(field, prepared)
        or MatchResult(column=None)
    )


def auto_map(
    template_fields: Iterable[TemplateField],
    columns: Iterable[str],
    existing_mapping: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Fill the gaps of ``existing_mapping`` with proposed columns.

    Entries with a non-empty value are kept as they are. Fields without a
    match stay absent from the result (rendered as "skip" by callers). The
    input mapping is not modified.
    """
    mapping = dict(existing_mapping or {})
    column_list = list(columns)
    for field in template_fields:
        if mapping.get(field.name):
            continue
        result = match_field(field.name, column_list)
        if result.matched:
            mapping[field.name] = result.column  # type: ignore[assignment]
            logger.debug(
                f"auto-map {field.name!r} -> {result.column!r} ({result.strategy.value})"
            )
    return mapping
