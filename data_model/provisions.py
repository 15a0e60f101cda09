"""
data_model/provisions.py — model przepisów (artykułów) kodeksu.

ProvisionRecord odpowiada jednemu artykułowi lub "Parágrafo único";
lista rekordów w kolejności źródła tworzy ProvisionList.
Pole `sections` to migawka ścieżki nagłówków (HierarchyPath) z chwili,
w której przepis został otwarty.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class HeadingLevel(IntEnum):
    """Poziom nagłówka w konspekcie kodeksu (1 = najwyższy)."""
    PARTE     = 1
    LIVRO     = 2
    TITULO    = 3
    CAPITULO  = 4
    SECAO     = 5
    SUBSECAO  = 6


MAX_DEPTH = len(HeadingLevel)


@dataclass(frozen=True, slots=True)
class HierarchyPath:
    """
    Niemutowalna ścieżka aktywnych nagłówków — jeden slot na HeadingLevel.

    Slot i przechowuje ostatni widziany nagłówek poziomu i+1 (None = brak).
    Każda zmiana zwraca nową wartość, więc migawka raz przypisana do
    przepisu nie zmienia się przy kolejnych nagłówkach.
    """
    slots: tuple[str | None, ...] = (None,) * MAX_DEPTH

    def with_heading(self, level: HeadingLevel, title: str) -> HierarchyPath:
        """Zachowuje sloty płytsze niż `level`, czyści głębsze, wstawia `title`."""
        keep = self.slots[: level - 1]
        rest = (None,) * (MAX_DEPTH - level)
        return HierarchyPath(keep + (title,) + rest)

    def deepest_index(self) -> int | None:
        for i in range(MAX_DEPTH - 1, -1, -1):
            if self.slots[i] is not None:
                return i
        return None

    def _replace_deepest(self, title: str) -> HierarchyPath:
        idx = self.deepest_index()
        if idx is None:
            return self
        slots = list(self.slots)
        slots[idx] = title
        return HierarchyPath(tuple(slots))

    def append_text(self, text: str) -> HierarchyPath:
        """Dokleja (spacja + text) do najgłębszego zajętego slotu."""
        idx = self.deepest_index()
        if idx is None:
            return self
        return self._replace_deepest(f"{self.slots[idx]} {text}")

    def rstrip_deepest(self) -> HierarchyPath:
        idx = self.deepest_index()
        if idx is None:
            return self
        return self._replace_deepest(self.slots[idx].rstrip())  # type: ignore[union-attr]

    def as_tuple(self) -> tuple[str, ...]:
        """Obecne nagłówki od najpłytszego; brakujące poziomy są pomijane."""
        return tuple(s for s in self.slots if s is not None)

    def __len__(self) -> int:
        return len(self.as_tuple())


@dataclass(frozen=True, slots=True)
class ProvisionRecord:
    citation: str               # np. "Art. 1º", "Art. 37-A", "Parágrafo único"
    content: str                # treść znormalizowana (pojedyncze spacje)
    sections: tuple[str, ...]   # migawka HierarchyPath.as_tuple()

    def to_dict(self) -> dict[str, Any]:
        return {
            "citation": self.citation,
            "content":  self.content,
            "sections": list(self.sections),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProvisionRecord:
        try:
            return cls(
                citation=str(data["citation"]),
                content=str(data["content"]),
                sections=tuple(str(s) for s in data["sections"]),
            )
        except KeyError as e:
            raise ValueError(f"Brak pola {e} w rekordzie przepisu.") from e


# Kolekcja przepisów w kolejności dokumentu.
type ProvisionList = list[ProvisionRecord]
