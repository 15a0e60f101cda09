"""Komenda: cvx reset — usuwanie przepisów z bazy."""

from __future__ import annotations

import argparse
from collections import Counter

from rich.console import Console
from rich.table import Table
from rich import box

console = Console()

_DELETE_ALL_SQL = "DELETE FROM provision RETURNING doc_id"
_DELETE_DOC_SQL = "DELETE FROM provision WHERE doc_id = %s RETURNING doc_id"


def _reset_provisions(cur, doc_id: str | None) -> Counter[str]:
    """Usuwa przepisy (wszystkie albo jednego dokumentu); zwraca liczbę usuniętych per doc_id."""
    if doc_id:
        cur.execute(_DELETE_DOC_SQL, (doc_id,))
    else:
        cur.execute(_DELETE_ALL_SQL)
    return Counter(row[0] for row in cur.fetchall())


def _print_deleted(deleted: Counter[str]) -> None:
    if not deleted:
        console.print("[yellow]Brak przepisów do usunięcia.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white")
    table.add_column("DOC_ID", style="cyan")
    table.add_column("USUNIĘTO", justify="right")
    for doc, n in sorted(deleted.items()):
        table.add_row(doc, str(n))
    console.print(table)
    console.print(f"[green]Usunięto {deleted.total()} wierszy z [bold]provision[/bold][/green]")


def run(args: argparse.Namespace) -> None:
    from cvx._db import ensure_schema, get_connection

    doc_id: str | None = getattr(args, "doc_id", None)

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    with conn, conn.cursor() as cur:
        ensure_schema(cur)
        deleted = _reset_provisions(cur, doc_id)

    _print_deleted(deleted)
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "reset",
        help="Usuwa przepisy z bazy (bez potwierdzenia).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa wiersze z tabeli provision i pokazuje, ile usunięto dla każdego
dokumentu. Działa natychmiast, bez pytania o potwierdzenie.

Przykłady:
  cvx reset
  cvx reset --doc-id L10406
        """,
    )
    p.add_argument(
        "--doc-id",
        metavar="ID",
        default=None,
        help="Ogranicz usuwanie do doc_id=ID.",
    )
    p.set_defaults(func=run)
