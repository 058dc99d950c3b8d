"""
Registry Module

Insertion-ordered collection of the wind fields acting on a particle
system, keyed by field id.
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from windsim.fields import WindField

logger = logging.getLogger(__name__)


class FieldRegistry:
    """
    Ordered set of wind fields.

    Order has no effect on the summed force; it only matters to
    collaborators that layer indicators in insertion order.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._fields: Dict[str, 'WindField'] = {}

    def add(self, field: 'WindField') -> 'WindField':
        """
        Register a field.

        Adding a field whose id is already present replaces the old
        entry in place.

        Returns:
            The registered field
        """
        if field.id in self._fields:
            logger.debug(f"Replacing field {field.id}")
        else:
            logger.info(f"Added {field.field_type.value} field {field.id}")
        self._fields[field.id] = field
        return field

    def remove(self, field_id: str) -> Optional['WindField']:
        """
        Unregister a field by id.

        Unknown ids are ignored.

        Returns:
            The removed field, or None if nothing was registered under the id
        """
        field = self._fields.pop(field_id, None)
        if field is not None:
            logger.info(f"Removed {field.field_type.value} field {field_id}")
        return field

    def get(self, field_id: str) -> Optional['WindField']:
        """Look up a field by id."""
        return self._fields.get(field_id)

    def enabled_fields(self) -> List['WindField']:
        """Fields whose ``enabled`` flag is set, in insertion order."""
        return [f for f in self._fields.values() if f.enabled]

    def for_each_enabled(self, visitor: Callable[['WindField'], None]):
        """Call ``visitor`` on every enabled field."""
        for field in self.enabled_fields():
            visitor(field)

    def clear(self):
        """Remove every field."""
        if self._fields:
            logger.info(f"Cleared {len(self._fields)} fields")
        self._fields.clear()

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator['WindField']:
        return iter(list(self._fields.values()))

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def __repr__(self) -> str:
        enabled = sum(1 for f in self._fields.values() if f.enabled)
        return f"FieldRegistry(fields={len(self._fields)}, enabled={enabled})"
