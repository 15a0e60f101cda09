"""Komenda: cvx scrape — pobiera stronę kodeksu i parsuje ją do przepisów."""

from __future__ import annotations

import argparse
import re
import unicodedata
from pathlib import Path
from urllib.parse import urlparse

from rich.console import Console

from cvx.commands.parse import _parse, _print_stats, _save, add_output_arguments

console = Console()


def _doc_id_from_url(url: str) -> str:
    """Generuje domyślny doc_id z URL (ostatni segment ścieżki bez rozszerzenia)."""
    parsed = urlparse(url)
    stem = Path(parsed.path).stem or parsed.netloc.replace(".", "-")
    raw = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    raw = re.sub(r"[^\w-]", "-", raw).strip("-")
    raw = re.sub(r"-{2,}", "-", raw)
    return raw[:80] or "url-doc"


def run(args: argparse.Namespace) -> None:
    from html_parser.parser import default_url, fetch_lines

    url: str = args.url or default_url()
    doc_id: str = args.doc_id or _doc_id_from_url(url)

    console.print(f"Pobieranie [bold]{url}[/bold] (doc_id=[cyan]{doc_id}[/cyan]) …")

    try:
        lines = fetch_lines(url, timeout=args.timeout, max_retries=args.retries)
    except Exception as e:
        console.print(f"[red]Błąd pobierania:[/red] {e}")
        raise SystemExit(1)

    console.print(f"Pobrano [bold]{len(lines)}[/bold] linii.")

    records, stats = _parse(lines)
    _print_stats(stats)

    safe_name = re.sub(r"[^\w-]", "-", doc_id)
    _save(records, doc_id, args, default_json=Path(f"{safe_name}.provisions.json"))


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "scrape",
        help="Pobiera stronę kodeksu (domyślnie Código Civil z planalto.gov.br) i parsuje ją na przepisy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Pobiera stronę HTML kodeksu, spłaszcza ją do linii tekstu i parsuje na przepisy.

Domyślny URL: zmienna CVX_URL lub Código Civil (Lei nº 10.406/2002).
Timeout żądania: --timeout lub zmienna CVX_HTTP_TIMEOUT (domyślnie 30 s).

Przykłady:
  cvx scrape --show --limit 20
  cvx scrape --json civil_code.json
  cvx scrape https://www.planalto.gov.br/ccivil_03/Leis/2002/L10406.htm --out both
        """,
    )
    p.add_argument(
        "url",
        metavar="URL",
        nargs="?",
        default=None,
        help="Adres URL strony HTML (domyślnie: CVX_URL lub Código Civil).",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SEK",
        help="Timeout pojedynczego żądania w sekundach.",
    )
    p.add_argument(
        "--retries",
        type=int,
        default=3,
        metavar="N",
        help="Liczba ponowień przy błędach sieci / 5xx (domyślnie: 3).",
    )
    add_output_arguments(p, default_out="json")
    p.set_defaults(func=run)
