"""
legal_parser/heading_patterns.py — wzorce regex do rozpoznawania nagłówków kodeksu.

Każdy HeadingPattern zawiera:
  - regex  : skompilowany wzorzec (dopasowanie na początku linii)
  - level  : poziom HeadingLevel (1 = PARTE … 6 = Subseção)

Słowa kluczowe bywają renderowane z odstępami między literami
("P A R T E", "T Í T U L O"), więc między każdą literą dopuszczamy \\s*.
Wzorce są testowane w kolejności; pierwsza pasująca wygrywa.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from data_model.provisions import HeadingLevel


@dataclass(frozen=True, slots=True)
class HeadingPattern:
    regex: re.Pattern[str]
    level: HeadingLevel


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    level: HeadingLevel
    keyword: str        # surowy dopasowany prefiks, np. "P A R T E"


def _spaced(word: str) -> str:
    """Np. PARTE → P\\s*A\\s*R\\s*T\\s*E."""
    return r"\s*".join(re.escape(ch) for ch in word)


def _p(word: str) -> re.Pattern[str]:
    # słowo kluczowe + spacja, ".", ":", półpauza albo koniec linii;
    # "Partes da ..." i "Parte-se ..." to nie nagłówki
    return re.compile(rf"^({_spaced(word)})(?=[\s.:\u2013\u2014]|$)", re.IGNORECASE | re.UNICODE)


PATTERNS: list[HeadingPattern] = [
    HeadingPattern(regex=_p("PARTE"),     level=HeadingLevel.PARTE),
    HeadingPattern(regex=_p("LIVRO"),     level=HeadingLevel.LIVRO),
    HeadingPattern(regex=_p("TÍTULO"),    level=HeadingLevel.TITULO),
    HeadingPattern(regex=_p("CAPÍTULO"),  level=HeadingLevel.CAPITULO),
    HeadingPattern(regex=_p("Seção"),     level=HeadingLevel.SECAO),
    HeadingPattern(regex=_p("Subseção"),  level=HeadingLevel.SUBSECAO),
]

# Sam prefiks słowa kluczowego PARTE (używany przez normalizer).
PARTE_KEYWORD_RE = PATTERNS[0].regex


def match_heading(line: str) -> HeadingMatch | None:
    """Zwraca HeadingMatch dla linii-nagłówka albo None."""
    for pat in PATTERNS:
        m = pat.regex.match(line)
        if m:
            return HeadingMatch(level=pat.level, keyword=m.group(1))
    return None
