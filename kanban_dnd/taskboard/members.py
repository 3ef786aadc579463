"""Member roster that task assignees refer to."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from loguru import logger

from .store import ValidationError


class MemberRoster:
    """Ordered list of unique member names."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = []
        for name in names:
            self.add(name)

    def add(self, name: str) -> str | None:
        """
        Add a member.

        Blank names are ignored and return None; duplicates raise.
        """
        cleaned = name.strip()
        if not cleaned:
            return None
        if cleaned in self._names:
            raise ValidationError("name", f"Member '{cleaned}' already exists.")
        self._names.append(cleaned)
        logger.info(f"Added member '{cleaned}'")
        return cleaned

    def remove(self, name: str) -> None:
        """Remove a member. Tasks already assigned to them are left as is."""
        cleaned = name.strip()
        try:
            self._names.remove(cleaned)
        except ValueError as exc:
            raise KeyError(name) from exc
        logger.info(f"Removed member '{cleaned}'")

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)
