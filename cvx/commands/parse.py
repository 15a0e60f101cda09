"""Komenda: cvx parse — parsowanie lokalnego pliku (HTML lub tekst) do przepisów."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.provisions import ProvisionList
from legal_parser.parser import ParseStats, ProvisionParser

console = Console()


# ---------------------------------------------------------------------------
# Parsowanie
# ---------------------------------------------------------------------------

def _parse(lines: list[str]) -> tuple[ProvisionList, ParseStats]:
    parser = ProvisionParser()
    for line in lines:
        parser.feed(line)
    return parser.finish(), parser.stats


def _print_stats(stats: ParseStats) -> None:
    console.print(
        f"Linii: [bold]{stats.lines}[/bold], nagłówków: [bold]{stats.headings}[/bold], "
        f"przepisów: [bold]{stats.emitted}[/bold] "
        f"[dim](rozpoczętych {stats.opened}, odrzuconych jako revogado {stats.revoked})[/dim]"
    )


# ---------------------------------------------------------------------------
# Zapis do JSON
# ---------------------------------------------------------------------------

def _write_json(records: ProvisionList, json_path: Path) -> None:
    data = [r.to_dict() for r in records]
    json_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[green]JSON:[/green] {json_path}  ({len(records)} przepisów)")


# ---------------------------------------------------------------------------
# Zapis do bazy danych
# ---------------------------------------------------------------------------

_UPSERT_SQL = """
    INSERT INTO provision
        (doc_id, seq, citation, content, sections)
    VALUES %s
    ON CONFLICT (doc_id, seq) DO UPDATE SET
        citation = EXCLUDED.citation,
        content  = EXCLUDED.content,
        sections = EXCLUDED.sections
"""

# Ponowny import krótszej wersji dokumentu nie może zostawić starych wierszy.
_TRIM_SQL = "DELETE FROM provision WHERE doc_id = %s AND seq >= %s"


def _write_db(records: ProvisionList, doc_id: str) -> None:
    from cvx._db import ensure_schema, get_connection
    import psycopg2.extras

    if not records:
        console.print("[yellow]Brak przepisów do zapisania w bazie.[/yellow]")
        return

    rows = [
        (doc_id, seq, r.citation, r.content, list(r.sections))
        for seq, r in enumerate(records)
    ]

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    with conn, conn.cursor() as cur:
        ensure_schema(cur)
        psycopg2.extras.execute_values(cur, _UPSERT_SQL, rows)
        cur.execute(_TRIM_SQL, (doc_id, len(rows)))

    console.print(f"[green]DB:[/green] upsert {len(records)} przepisów dla doc_id='{doc_id}'")


# ---------------------------------------------------------------------------
# Wyświetlanie w terminalu
# ---------------------------------------------------------------------------

def _show_table(records: ProvisionList, limit: int | None = None) -> None:
    if not records:
        console.print("[yellow]Brak przepisów.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",        justify="right", no_wrap=True, style="dim")
    table.add_column("CYTAT",    no_wrap=True, style="bold cyan")
    table.add_column("SEKCJA",   no_wrap=False, max_width=40, style="dim")
    table.add_column("LEN",      justify="right", no_wrap=True)
    table.add_column("TREŚĆ",    no_wrap=False, max_width=60)

    shown = records if limit is None else records[:limit]
    for i, rec in enumerate(shown, start=1):
        table.add_row(
            str(i),
            rec.citation,
            rec.sections[-1] if rec.sections else "-",
            str(len(rec.content)),
            rec.content[:120],
        )

    console.print()
    console.print(table)
    suffix = f" (pokazano {len(shown)})" if len(shown) < len(records) else ""
    console.print(f"  [dim]{len(records)} przepisów{suffix}[/dim]\n")


# ---------------------------------------------------------------------------
# Wspólne: zapis wyniku
# ---------------------------------------------------------------------------

def _save(records: ProvisionList, doc_id: str, args: argparse.Namespace, default_json: Path) -> None:
    out = args.out  # "json" | "db" | "both"

    if out in ("json", "both"):
        json_path = Path(args.json) if args.json else default_json
        _write_json(records, json_path)

    if out in ("db", "both"):
        _write_db(records, doc_id)

    if args.show:
        _show_table(records, limit=args.limit)


def _positive_int(value: str) -> int:
    """Typ argparse dla --limit: liczba całkowita >= 1."""
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"oczekiwano liczby całkowitej, podano '{value}'")
    if n < 1:
        raise argparse.ArgumentTypeError(f"wartość musi być >= 1, podano {n}")
    return n


def add_output_arguments(p: argparse.ArgumentParser, default_out: str) -> None:
    p.add_argument(
        "--doc-id",
        metavar="ID",
        default=None,
        help="Identyfikator dokumentu w bazie.",
    )
    p.add_argument(
        "--out",
        choices=["json", "db", "both"],
        default=default_out,
        help=f"Cel zapisu: json, db lub both (domyślnie: {default_out}).",
    )
    p.add_argument(
        "--json",
        metavar="PLIK.json",
        default=None,
        help="Ścieżka pliku JSON (domyślnie: wyliczana ze źródła).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetl tabelę przepisów w terminalu po zapisie.",
    )
    p.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Z --show: pokaż tylko pierwsze N wierszy.",
    )


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from html_parser.parser import read_lines

    src_path = Path(args.source_file)
    doc_id: str = args.doc_id or src_path.stem

    console.print(f"Parsowanie [bold]{src_path}[/bold] (doc_id=[cyan]{doc_id}[/cyan]) …")

    try:
        lines = read_lines(src_path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Błąd odczytu pliku:[/red] {e}")
        raise SystemExit(1)

    records, stats = _parse(lines)
    _print_stats(stats)

    _save(records, doc_id, args, default_json=src_path.with_suffix(".provisions.json"))


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "parse",
        help="Parsuje lokalny plik (.htm/.html lub tekst) na przepisy i zapisuje do JSON / bazy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parsuje lokalną kopię kodeksu na listę przepisów (citation, content, sections).

Pliki .htm / .html są najpierw spłaszczane do linii tekstu (jak innerText
przeglądarki); inne pliki są czytane linia po linii.

Przykłady:
  cvx parse L10406.htm --show
  cvx parse kodeks.txt --out json --json civil_code.json
  cvx parse L10406.htm --out db --doc-id cc2002
        """,
    )
    p.add_argument(
        "source_file",
        metavar="PLIK",
        help="Ścieżka do pliku źródłowego.",
    )
    add_output_arguments(p, default_out="json")
    p.set_defaults(func=run)
