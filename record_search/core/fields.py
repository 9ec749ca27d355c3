"""Searchable field extraction from records."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


class FieldKind(str, Enum):
    """How a strategy should treat a field's value."""

    NAME = "name"
    LOCATION = "location"
    TEXT = "text"


@dataclass(frozen=True)
class SearchableField:
    """A named, typed value derived from a record for one search call."""

    name: str
    value: str
    kind: FieldKind


# (field name, record attributes tried in order, kind)
FIELD_SOURCES: Tuple[Tuple[str, Tuple[str, ...], FieldKind], ...] = (
    ("name", ("name", "college_name"), FieldKind.NAME),
    ("city", ("city",), FieldKind.LOCATION),
    ("state", ("state",), FieldKind.LOCATION),
    ("course", ("course_name", "course"), FieldKind.TEXT),
    ("type", ("college_type", "type"), FieldKind.TEXT),
    ("management", ("management_type", "management"), FieldKind.TEXT),
)


def get_attribute(record: Any, key: str) -> Any:
    """Read an attribute from a mapping or plain object, None when absent."""
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


class FieldExtractor:
    """Produces the fixed list of searchable fields for a record."""

    def __init__(self, sources=FIELD_SOURCES) -> None:
        self.sources = sources

    def extract(self, record: Any) -> List[SearchableField]:
        """
        Extract searchable fields from a record.

        Fields whose value is missing or blank are omitted. The record is
        never modified and missing attributes never raise.

        Args:
            record: Mapping or object holding record attributes

        Returns:
            List of SearchableField in a fixed order
        """
        fields = []
        for name, attributes, kind in self.sources:
            value = self._first_value(record, attributes)
            if value is not None:
                fields.append(SearchableField(name=name, value=value, kind=kind))
        return fields

    def searchable_text(self, record: Any) -> str:
        """Join every field value of a record into one document string."""
        return " ".join(f.value for f in self.extract(record))

    @staticmethod
    def _first_value(record: Any, attributes: Tuple[str, ...]) -> Optional[str]:
        for attribute in attributes:
            value = get_attribute(record, attribute)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                return text
        return None
