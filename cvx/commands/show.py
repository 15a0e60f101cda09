"""Komenda: cvx show — wyświetla przepisy z zapisanego pliku JSON."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.console import Console

from data_model.provisions import ProvisionList, ProvisionRecord
from cvx.commands.parse import _positive_int, _show_table

console = Console()


def _load_json(json_path: Path) -> ProvisionList:
    data = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Oczekiwano tablicy JSON z przepisami.")
    records: ProvisionList = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Element {i} nie jest obiektem JSON.")
        records.append(ProvisionRecord.from_dict(item))
    return records


def _filter(records: ProvisionList, section: str | None) -> ProvisionList:
    if not section:
        return records
    needle = section.casefold()
    return [r for r in records if any(needle in s.casefold() for s in r.sections)]


def run(args: argparse.Namespace) -> None:
    json_path = Path(args.json_file)
    if not json_path.exists():
        console.print(f"[red]Plik nie istnieje:[/red] {json_path}")
        raise SystemExit(1)

    try:
        records = _load_json(json_path)
    except json.JSONDecodeError as e:
        console.print(f"[red]Nieprawidłowy JSON:[/red] {e}")
        raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]Błąd formatu:[/red] {e}")
        raise SystemExit(1)

    _show_table(_filter(records, args.section), limit=args.limit)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "show",
        help="Wyświetla tabelę przepisów z pliku JSON (wynik parse / scrape).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wczytuje plik JSON z przepisami i wyświetla go jako tabelę.

Przykłady:
  cvx show civil_code.json --limit 30
  cvx show civil_code.json --section "CAPÍTULO I"
        """,
    )
    p.add_argument(
        "json_file",
        metavar="PLIK.json",
        help="Ścieżka do pliku JSON.",
    )
    p.add_argument(
        "--section",
        metavar="TEKST",
        default=None,
        help="Pokaż tylko przepisy, których ścieżka sekcji zawiera TEKST.",
    )
    p.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Pokaż tylko pierwsze N wierszy.",
    )
    p.set_defaults(func=run)
