"""Połączenie z bazą PostgreSQL — konfiguracja przez zmienne środowiskowe (lub plik .env)."""

from __future__ import annotations

import os
import pathlib

import psycopg2
import psycopg2.extras
from dotenv import load_dotenv

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env")

# Tabela przepisów: jeden wiersz na przepis, seq = pozycja w kolejności źródła.
# Idempotentne (IF NOT EXISTS), wykonywane przed każdym zapisem i resetem.
SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS provision (
        doc_id     TEXT    NOT NULL,
        seq        INTEGER NOT NULL CHECK (seq >= 0),
        citation   TEXT    NOT NULL,
        content    TEXT    NOT NULL,
        sections   TEXT[]  NOT NULL DEFAULT '{}',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (doc_id, seq)
    );
    CREATE INDEX IF NOT EXISTS provision_citation_idx ON provision (doc_id, citation);
"""


def get_connection() -> psycopg2.extensions.connection:
    return psycopg2.connect(
        host     = os.getenv("PGHOST",     "localhost"),
        port     = int(os.getenv("PGPORT", "5432")),
        dbname   = os.getenv("PGDATABASE", "civilcodex"),
        user     = os.getenv("PGUSER",     "civilcodex"),
        password = os.getenv("PGPASSWORD", "civilcodex"),
    )


def ensure_schema(cur) -> None:
    cur.execute(SCHEMA_SQL)
