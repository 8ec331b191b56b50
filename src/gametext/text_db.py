"""
Text banks and the text database.

The text database holds one bank per language for each text group. Each bank
maps a numeric line id to its display string.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .errors import NotFound, StructuralViolation

logger = logging.getLogger("gametext")

DEFAULT_TEXT_GROUP = "common"


class TextBank:
    """All lines of one language, keyed by line id."""

    def __init__(self, language_id: int):
        self._language_id = int(language_id)
        self._lines: dict[int, str] = {}

    def __repr__(self) -> str:
        return f"TextBank(language_id={self._language_id}, lines={len(self._lines)})"

    @property
    def language_id(self) -> int:
        return self._language_id

    @property
    def lines(self) -> Mapping[int, str]:
        """Read-only view of the lines, ascending by id."""
        return MappingProxyType(dict(sorted(self._lines.items())))

    def line_exists(self, line_id: int) -> bool:
        return line_id in self._lines

    def line(self, line_id: int) -> str:
        try:
            return self._lines[line_id]
        except KeyError:
            raise NotFound(
                f"Line #x{line_id:x} not found in bank for language {self._language_id}"
            ) from None

    def set_line(self, line_id: int, text: str) -> None:
        """Insert or overwrite a line."""
        self._lines[int(line_id)] = text


class TextDatabase:
    """Text banks per language for each text group."""

    def __init__(self):
        self._banks: dict[str, dict[int, TextBank]] = {}

    def __repr__(self) -> str:
        return f"TextDatabase(groups={sorted(self._banks)})"

    @property
    def groups(self) -> Mapping[str, Mapping[int, TextBank]]:
        return MappingProxyType(
            {name: MappingProxyType(dict(sorted(banks.items()))) for name, banks in self._banks.items()}
        )

    def banks(self, group: str) -> Mapping[int, TextBank]:
        if group not in self._banks:
            raise NotFound(f"Text group '{group}' not found")
        return MappingProxyType(dict(sorted(self._banks[group].items())))

    def bank_exists(self, group: str, language_id: int) -> bool:
        return language_id in self._banks.get(group, {})

    def add_bank(self, group: str, bank: TextBank) -> TextBank:
        """Register a bank; a second bank for the same (group, language) is rejected."""
        if self.bank_exists(group, bank.language_id):
            raise StructuralViolation(
                f"Text group '{group}' already has a bank for language {bank.language_id}"
            )
        self._banks.setdefault(group, {})[bank.language_id] = bank
        logger.debug("Added text bank: group=%s lang=%d", group, bank.language_id)
        return bank

    def bank_by_id(self, group: str, language_id: int) -> TextBank | None:
        return self._banks.get(group, {}).get(language_id)

    def bank_for(self, group: str, language_id: int) -> TextBank:
        """Return the bank for (group, language), creating it on first reference."""
        bank = self.bank_by_id(group, language_id)
        if bank is None:
            bank = self.add_bank(group, TextBank(language_id))
        return bank
