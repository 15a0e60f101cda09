"""
legal_parser/parser.py — parsowanie linii tekstu kodeksu do listy przepisów.

Architektura:
  linie → classify_line() → (HEADING | PROVISION_START | BLANK | TEXT)
  → ProvisionParser (maszyna stanów, tabela przejść _TRANSITIONS)
      HEADING          → HierarchyPath.with_heading()   (nagłówek + kontynuacje)
      PROVISION_START  → _OpenProvision                 (migawka ścieżki)
      TEXT             → doklejenie do nagłówka / przepisu albo pominięcie
  → finalizacja: złączenie fragmentów → filtr "revogado" → lista wynikowa

Kluczowe funkcje publiczne:
  parse_lines(lines) -> ProvisionList
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Iterable

from data_model.provisions import (
    HeadingLevel,
    HierarchyPath,
    ProvisionList,
    ProvisionRecord,
)
from legal_parser.heading_patterns import match_heading
from legal_parser.normalizer import collapse_whitespace, normalize_heading
from legal_parser.provision_patterns import (
    ProvisionStart,
    RevocationPredicate,
    is_revoked,
    match_provision,
)

# ---------------------------------------------------------------------------
# Klasyfikacja linii
# ---------------------------------------------------------------------------


class LineKind(StrEnum):
    HEADING         = "heading"
    PROVISION_START = "provision_start"
    BLANK           = "blank"
    TEXT            = "text"


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    kind: LineKind
    text: str                   # linia po strip()


@dataclass(frozen=True, slots=True)
class HeadingLine(ClassifiedLine):
    level: HeadingLevel
    title: str                  # znormalizowany tytuł


@dataclass(frozen=True, slots=True)
class ProvisionStartLine(ClassifiedLine):
    provision: ProvisionStart


def classify_line(line: str) -> ClassifiedLine:
    """
    Klasyfikuje jedną linię wejścia.

    Priorytet: nagłówek > artykuł > "Parágrafo único" > pusta > treść.
    """
    trimmed = line.strip()
    if not trimmed:
        return ClassifiedLine(LineKind.BLANK, trimmed)

    heading = match_heading(trimmed)
    if heading:
        return HeadingLine(
            LineKind.HEADING,
            trimmed,
            level=heading.level,
            title=normalize_heading(trimmed, heading.level),
        )

    start = match_provision(trimmed)
    if start:
        return ProvisionStartLine(LineKind.PROVISION_START, trimmed, provision=start)

    return ClassifiedLine(LineKind.TEXT, trimmed)


# ---------------------------------------------------------------------------
# Stan parsera
# ---------------------------------------------------------------------------


class ParserState(StrEnum):
    NO_OPEN_CONTEXT         = "no_open_context"
    IN_HEADING_ACCUMULATION = "in_heading_accumulation"
    IN_PROVISION            = "in_provision"


@dataclass(slots=True)
class ParseStats:
    lines:     int = 0
    headings:  int = 0
    opened:    int = 0      # rozpoczęte przepisy
    emitted:   int = 0
    revoked:   int = 0      # odrzucone przez filtr


@dataclass(slots=True)
class _OpenProvision:
    citation: str
    sections: tuple[str, ...]
    fragments: list[str] = field(default_factory=list)

    def content(self) -> str:
        return collapse_whitespace(" ".join(self.fragments))


# akcja dostaje podklasę ClassifiedLine właściwą dla swojego LineKind
_Handler = Callable[["ProvisionParser", Any], None]


class ProvisionParser:
    """
    Parser strumieniowy: feed() dla każdej linii, finish() na końcu wejścia.

    Cały stan (ścieżka nagłówków, otwarty przepis, wynik) należy do jednej
    instancji; dla kolejnego dokumentu tworzymy nowy parser.
    """

    def __init__(self, is_revoked: RevocationPredicate = is_revoked) -> None:
        self._is_revoked = is_revoked
        self.state = ParserState.NO_OPEN_CONTEXT
        self.path = HierarchyPath()
        self.records: ProvisionList = []
        self.stats = ParseStats()
        self._open: _OpenProvision | None = None
        self._finished = False

    # -- API ----------------------------------------------------------------

    def feed(self, line: str) -> None:
        if self._finished:
            raise ValueError("Parser został już zamknięty (finish()).")
        self.stats.lines += 1
        classified = classify_line(line)
        handler, next_state = _TRANSITIONS[(self.state, classified.kind)]
        handler(self, classified)
        self.state = next_state

    def finish(self) -> ProvisionList:
        """Finalizuje ostatni otwarty przepis i zwraca wynik."""
        if not self._finished:
            self._finalize()
            self.state = ParserState.NO_OPEN_CONTEXT
            self._finished = True
        return self.records

    # -- Akcje --------------------------------------------------------------

    def _on_heading(self, line: HeadingLine) -> None:
        self._finalize()
        if self.state is ParserState.IN_HEADING_ACCUMULATION:
            self.path = self.path.rstrip_deepest()
        self.path = self.path.with_heading(line.level, line.title)
        self.stats.headings += 1

    def _on_heading_text(self, line: ClassifiedLine) -> None:
        self.path = self.path.append_text(collapse_whitespace(line.text))

    def _on_provision_start(self, line: ProvisionStartLine) -> None:
        self._finalize()
        self._open = _OpenProvision(
            citation=line.provision.citation,
            sections=self.path.as_tuple(),
        )
        if line.provision.text:
            self._open.fragments.append(line.provision.text)
        self.stats.opened += 1

    def _on_provision_text(self, line: ClassifiedLine) -> None:
        # w stanie IN_PROVISION przepis jest zawsze otwarty
        if self._open is not None:
            self._open.fragments.append(line.text)

    def _ignore(self, line: ClassifiedLine) -> None:
        pass

    def _finalize(self) -> None:
        if self._open is None:
            return
        record = ProvisionRecord(
            citation=self._open.citation,
            content=self._open.content(),
            sections=self._open.sections,
        )
        self._open = None
        if self._is_revoked(record.content):
            self.stats.revoked += 1
            return
        self.records.append(record)
        self.stats.emitted += 1


_S = ParserState
_K = LineKind
_P = ProvisionParser

# (stan, rodzaj linii) → (akcja, następny stan)
_TRANSITIONS: dict[tuple[ParserState, LineKind], tuple[_Handler, ParserState]] = {
    (_S.NO_OPEN_CONTEXT, _K.HEADING):                 (_P._on_heading, _S.IN_HEADING_ACCUMULATION),
    (_S.NO_OPEN_CONTEXT, _K.PROVISION_START):         (_P._on_provision_start, _S.IN_PROVISION),
    (_S.NO_OPEN_CONTEXT, _K.BLANK):                   (_P._ignore, _S.NO_OPEN_CONTEXT),
    (_S.NO_OPEN_CONTEXT, _K.TEXT):                    (_P._ignore, _S.NO_OPEN_CONTEXT),

    (_S.IN_HEADING_ACCUMULATION, _K.HEADING):         (_P._on_heading, _S.IN_HEADING_ACCUMULATION),
    (_S.IN_HEADING_ACCUMULATION, _K.PROVISION_START): (_P._on_provision_start, _S.IN_PROVISION),
    (_S.IN_HEADING_ACCUMULATION, _K.BLANK):           (_P._ignore, _S.NO_OPEN_CONTEXT),
    (_S.IN_HEADING_ACCUMULATION, _K.TEXT):            (_P._on_heading_text, _S.IN_HEADING_ACCUMULATION),

    (_S.IN_PROVISION, _K.HEADING):                    (_P._on_heading, _S.IN_HEADING_ACCUMULATION),
    (_S.IN_PROVISION, _K.PROVISION_START):            (_P._on_provision_start, _S.IN_PROVISION),
    (_S.IN_PROVISION, _K.BLANK):                      (_P._ignore, _S.IN_PROVISION),
    (_S.IN_PROVISION, _K.TEXT):                       (_P._on_provision_text, _S.IN_PROVISION),
}
del _P


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------


def parse_lines(
    lines: Iterable[str],
    is_revoked: RevocationPredicate = is_revoked,
) -> ProvisionList:
    """
    Parsuje linie tekstu kodeksu i zwraca listę ProvisionRecord w kolejności źródła.

    Args:
        lines:      Linie w kolejności czytania (białe znaki nieprzycięte).
        is_revoked: Predykat treści; przepisy, dla których zwraca True,
                    są pomijane (domyślnie: "revogado"/"revogada").
    """
    parser = ProvisionParser(is_revoked=is_revoked)
    for line in lines:
        parser.feed(line)
    return parser.finish()
