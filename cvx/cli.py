"""
cvx — narzędzie CLI dla civilcodex.

Użycie:
  cvx <komenda> [opcje]

Komendy:
  scrape        Pobiera stronę kodeksu i parsuje ją na przepisy (JSON / baza).
  parse         Parsuje lokalny plik (.htm/.html lub tekst) na przepisy.
  show          Wyświetla tabelę przepisów z pliku JSON.
  reset         Usuwa przepisy z bazy.
"""

from __future__ import annotations

import argparse
import sys

# Windows: terminal może używać cp1252 — wymuszamy UTF-8, żeby znaki
# diakrytyczne (ç, ã, º) były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from cvx.commands import scrape as cmd_scrape
from cvx.commands import parse as cmd_parse
from cvx.commands import show as cmd_show
from cvx.commands import reset as cmd_reset


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cvx",
        description="civilcodex — parser kodeksu do listy przepisów.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="cvx 0.1.0"
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_scrape.add_parser(subparsers)
    cmd_parse.add_parser(subparsers)
    cmd_show.add_parser(subparsers)
    cmd_reset.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
