"""Dynamic list controller for the skills field.

SkillList backs the variable-length list of skill inputs. Each entry carries a
stable identifier taken from a monotonically increasing counter at append
time. Identifiers are independent of position and are never reused, even for
entries created after earlier ones were removed, so a view layer can key its
inputs on ``entry.id`` without collisions.

The list never holds fewer than MIN_ENTRIES entries.
"""

import itertools
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillEntry:
    """One skill input: a value plus its stable identity.

    Attributes:
        id: Unique identifier assigned when the entry was appended
        value: Current text of the input

    Examples:
        >>> entry = SkillEntry(id=3, value="Go")
        >>> entry.to_dict()
        {'value': 'Go'}
    """
    id: int
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Record shape of the entry; the identity is a view concern and is omitted."""
        return {"value": self.value}


class SkillList:
    """Ordered list of skill entries with a minimum size of one.

    Examples:
        >>> skills = SkillList()
        >>> len(skills)
        1
        >>> skills.append("Python").id
        2
        >>> skills.remove(0)
        True
        >>> skills.remove(0)
        False
        >>> skills.values()
        ['Python']
    """

    MIN_ENTRIES = 1

    def __init__(self, values: Optional[List[str]] = None) -> None:
        self._ids = itertools.count(1)
        self._entries: List[SkillEntry] = []
        for value in values or [""] * self.MIN_ENTRIES:
            self._entries.append(SkillEntry(id=next(self._ids), value=value))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SkillEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> SkillEntry:
        return self._entries[self._check_index(index)]

    def __repr__(self) -> str:
        return f"SkillList({self._entries!r})"

    @property
    def entries(self) -> Tuple[SkillEntry, ...]:
        return tuple(self._entries)

    @property
    def can_remove(self) -> bool:
        """Whether removing an entry is currently allowed."""
        return len(self._entries) > self.MIN_ENTRIES

    def append(self, value: str = "") -> SkillEntry:
        """Add an entry at the end with a fresh identifier."""
        entry = SkillEntry(id=next(self._ids), value=value)
        self._entries.append(entry)
        logger.debug("Appended skill entry %d at position %d", entry.id, len(self._entries) - 1)
        return entry

    def remove(self, index: int) -> bool:
        """Remove the entry at ``index``.

        Returns:
            True if an entry was removed, False if the list is already at its
            minimum size (nothing changes in that case)

        Raises:
            IndexError: If ``index`` is out of range
        """
        index = self._check_index(index)
        if not self.can_remove:
            logger.debug("Refused to remove skill entry %d: list is at minimum size", index)
            return False
        entry = self._entries.pop(index)
        logger.debug("Removed skill entry %d from position %d", entry.id, index)
        return True

    def update(self, index: int, value: str) -> SkillEntry:
        """Replace the value at ``index``, keeping its identity and position.

        Raises:
            IndexError: If ``index`` is out of range
        """
        index = self._check_index(index)
        entry = replace(self._entries[index], value=value)
        self._entries[index] = entry
        return entry

    def index_of(self, entry_id: int) -> int:
        """Return the current position of the entry with ``entry_id``.

        Raises:
            KeyError: If no current entry has that identifier
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        raise KeyError(entry_id)

    def reset(self) -> None:
        """Return to a single empty entry. The new entry gets a fresh identifier."""
        self._entries = [SkillEntry(id=next(self._ids)) for _ in range(self.MIN_ENTRIES)]

    def values(self) -> List[str]:
        return [entry.value for entry in self._entries]

    def to_list(self) -> List[Dict[str, Any]]:
        """Entries in the record shape: ``[{"value": ...}, ...]``."""
        return [entry.to_dict() for entry in self._entries]

    def _check_index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Skill index must be an int, got {type(index).__name__}")
        if index < 0 or index >= len(self._entries):
            raise IndexError(
                f"Skill index {index} out of range for {len(self._entries)} entries"
            )
        return index


__all__ = [
    "SkillEntry",
    "SkillList",
]
