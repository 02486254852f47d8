"""
Ordering of student rows.

Names compare case-insensitively in natural order ("Smith2" before
"Smith10"); grades and attempt counts compare numerically. Ties fall back to
lastname, except when sorting by lastname, which falls back to firstname.

Descending order is produced by sorting ascending and reversing the result,
so rows that tie on the sort key also appear in reverse tie-break order
(e.g. two 85s come out as "Cole" then "Ant").
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from mcq_breakdown.domain_types import SortDirection, SortKey
from mcq_breakdown.exceptions import InvalidParameterError
from mcq_breakdown.schemas import StudentRow
from ._constants import SORT_CODES

_NATURAL_CHUNK = re.compile(r"(\d+)")

# A run of digits ranks where the character "0" would
_DIGIT_RUN_ORDINAL = ord("0")


def natural_key(text: str) -> Tuple[Tuple[int, int], ...]:
    """
    Case-insensitive natural-order sort key for a string.

    Runs of digits compare by numeric value; every other character compares
    one at a time by its upper-cased code point, so punctuation such as "-"
    sorts before digits and letters sort after them ("a-b" < "a1" < "ab").
    """
    parts = []
    # re.split with a capture group alternates text and digit runs
    for index, chunk in enumerate(_NATURAL_CHUNK.split(text.strip())):
        if index % 2:
            parts.append((_DIGIT_RUN_ORDINAL, int(chunk)))
        else:
            parts.extend((ord(char), 0) for char in chunk.upper())
    return tuple(parts)


_SORT_KEYS: Dict[SortKey, Callable[[StudentRow], tuple]] = {
    SortKey.LASTNAME: lambda row: (natural_key(row.lastname), natural_key(row.firstname)),
    SortKey.FIRSTNAME: lambda row: (natural_key(row.firstname), natural_key(row.lastname)),
    SortKey.GRADE: lambda row: (row.grade, natural_key(row.lastname)),
    SortKey.ATTEMPTS: lambda row: (row.questions_attempted, natural_key(row.lastname)),
}


@dataclass(frozen=True)
class SortSpec:
    """Sort column and direction for the student rows."""

    key: SortKey = SortKey.LASTNAME
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def from_code(cls, code: int) -> "SortSpec":
        """
        Build a sort spec from a report sort code.

        Codes 1-4 select lastname, firstname, grade and attempts in their
        natural direction (names ascending, numbers descending); the negated
        code selects the opposite direction.

        Raises:
            InvalidParameterError: If the code is not one of +/-1..4.
        """
        try:
            key, direction = SORT_CODES[abs(code)]
        except KeyError:
            raise InvalidParameterError(
                "Unknown sort code", context={"sort": code}
            ) from None
        if code < 0:
            direction = (
                SortDirection.DESC if direction == SortDirection.ASC else SortDirection.ASC
            )
        return cls(key=key, direction=direction)


def sort_rows(
    rows: Sequence[StudentRow],
    key: SortKey = SortKey.LASTNAME,
    direction: SortDirection = SortDirection.ASC,
) -> List[StudentRow]:
    """
    Return the rows ordered by ``key`` in ``direction``.

    The input sequence is not modified.
    """
    ordered = sorted(rows, key=_SORT_KEYS[key])
    if direction == SortDirection.DESC:
        ordered.reverse()
    return ordered
