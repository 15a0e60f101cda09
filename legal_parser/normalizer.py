"""
legal_parser/normalizer.py — normalizacja tekstu nagłówków i treści.

Co robimy:
  - PARTE: scalamy litery renderowane z odstępami ("P A R T E   G E R A L"
    → "PARTE GERAL"), słowo kluczowe oddzielamy od reszty jedną spacją
  - pozostałe poziomy: tylko zwijanie białych znaków do jednej spacji

Rozstrzelone litery występują w źródle tylko w nagłówkach PARTE.
W rozstrzelonym tytule litery dzieli jeden biały znak, a słowa kilka,
więc scalamy tam także krótkie słowa ("D O" → "DO"). W zwykłym tytule
krótkie słowa ("E", "A") zostają bez zmian.
"""

from __future__ import annotations

import re

from data_model.provisions import HeadingLevel
from legal_parser.heading_patterns import PARTE_KEYWORD_RE

# Dowolny ciąg białych znaków (także \xa0 z HTML).
_WS_RE = re.compile(r"\s+")

# Słowo renderowane literami rozdzielonymi pojedynczym białym znakiem,
# min. 3 litery ("E S P E C I A L"). Jego obecność oznacza tekst rozstrzelony.
_SPACED_WORD_RE = re.compile(r"(?<!\S)[^\W\d_](?:\s[^\W\d_]){2,}(?!\S)")

# To samo od 2 liter ("D O") — stosowane tylko w tekście rozstrzelonym.
_SPACED_RUN_RE = re.compile(r"(?<!\S)[^\W\d_](?:\s[^\W\d_])+(?!\S)")

# Co najmniej dwie sąsiednie litery, czyli zwykłe (nierozstrzelone) słowo.
_PLAIN_WORD_RE = re.compile(r"[^\W\d_]{2}")


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def is_letter_spaced(text: str) -> bool:
    return _SPACED_WORD_RE.search(text) is not None


def collapse_spaced_letters(text: str, letter_spaced: bool | None = None) -> str:
    """
    Scala słowa rozstrzelone literami: "E S P E C I A L" → "ESPECIAL".

    letter_spaced=None → wykrywane z tekstu. W tekście rozstrzelonym scalane
    są też słowa dwuliterowe; w zwykłym tylko ciągi min. 3 liter.
    """
    if letter_spaced is None:
        letter_spaced = is_letter_spaced(text)
    pattern = _SPACED_RUN_RE if letter_spaced else _SPACED_WORD_RE
    return pattern.sub(lambda m: _WS_RE.sub("", m.group()), text)


def normalize_heading(line: str, level: HeadingLevel) -> str:
    """Zwraca kanoniczny tytuł nagłówka dla przyciętej linii `line`."""
    if level is not HeadingLevel.PARTE:
        return collapse_whitespace(line)

    m = PARTE_KEYWORD_RE.match(line)
    if m is None:
        return collapse_whitespace(line)

    raw_keyword = m.group(1)
    keyword = _WS_RE.sub("", raw_keyword)    # wielkość liter jak w źródle
    rest = line[m.end():]
    if not rest.strip():
        return keyword

    # "P A R T E   D O ..." — rozstrzelone słowo kluczowe, reszta bez zwykłych słów
    spaced = is_letter_spaced(rest) or (
        raw_keyword != keyword and _PLAIN_WORD_RE.search(rest) is None
    )
    title = collapse_whitespace(collapse_spaced_letters(rest, letter_spaced=spaced))

    # "PARTE: GERAL" — interpunkcja zostaje przy słowie kluczowym
    if not rest[0].isspace():
        return f"{keyword}{title}"
    return f"{keyword} {title}"
