"""
data_model — struktury danych modelu civilcodex.

Użycie:
  from data_model import ProvisionRecord, HierarchyPath, HeadingLevel

Moduły:
  provisions — HeadingLevel, HierarchyPath, ProvisionRecord, ProvisionList

Mapowanie na JSON (tablica obiektów):
  citation → str        ("Art. 1º", "Art. 37-A", "Parágrafo único")
  content  → str        (treść przepisu, pojedyncze spacje)
  sections → list[str]  (ścieżka nagłówków od najpłytszego, bez pustych poziomów)
"""

from .provisions import (
    MAX_DEPTH,
    HeadingLevel,
    HierarchyPath,
    ProvisionRecord,
    ProvisionList,
)

__all__ = [
    "MAX_DEPTH",
    "HeadingLevel",
    "HierarchyPath",
    "ProvisionRecord",
    "ProvisionList",
]
