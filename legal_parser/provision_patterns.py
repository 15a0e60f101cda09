"""
legal_parser/provision_patterns.py — rozpoznawanie początku przepisu i odwołań.

Dwa rodzaje początku przepisu (sprawdzane w tej kolejności):
  1. artykuł numerowany:  "Art. 1º.", "Art. 37-A", "Art. 1.000."
  2. "Parágrafo único":   jedyny, nienumerowany paragraf artykułu

Po dopasowaniu reszta linii jest pierwszym fragmentem treści przepisu.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

SOLE_PARAGRAPH = "Parágrafo único"

# Art. <liczba z opcjonalnymi tysiącami> <º/ª/°>? <sufiks>? .?
_ARTICLE_RE = re.compile(
    r"^Art\.\s*(?P<number>\d+(?:\.\d{3})*)(?P<mark>[ºª°])?(?P<suffix>[-A-Za-z0-9]*)\.?\s*"
)
_SOLE_PARAGRAPH_RE = re.compile(r"^Parágrafo\s+único\.?\s*")

# "revogado" / "revogada" w dowolnej wielkości liter
_REVOKED_RE = re.compile(r"revogad[oa]", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ProvisionStart:
    citation: str
    text: str           # treść w tej samej linii co cytat (może być "")


def match_provision(line: str) -> ProvisionStart | None:
    m = _ARTICLE_RE.match(line)
    if m:
        citation = f"Art. {m['number']}{m['mark'] or ''}{m['suffix']}"
        return ProvisionStart(citation=citation, text=line[m.end():].strip())

    m = _SOLE_PARAGRAPH_RE.match(line)
    if m:
        return ProvisionStart(citation=SOLE_PARAGRAPH, text=line[m.end():].strip())

    return None


def is_revoked(content: str) -> bool:
    """True gdy treść przepisu oznacza go jako uchylony ("Revogado.")."""
    return _REVOKED_RE.search(content) is not None


# Predykat odrzucający przepis przy finalizacji.
type RevocationPredicate = Callable[[str], bool]
