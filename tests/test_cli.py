"""Tests for the cvx command-line interface (network and database mocked)."""

import argparse
import json
from collections import Counter

import psycopg2.extras
import pytest

import cvx._db as db_mod
import html_parser.parser as html_mod
from cvx.cli import build_parser, main
from cvx.commands.parse import _positive_int, _write_db
from cvx.commands.reset import _reset_provisions
from cvx.commands.scrape import _doc_id_from_url
from cvx.commands.show import _filter, _load_json
from data_model.provisions import ProvisionRecord

SOURCE_LINES = [
    "Presidência da República",
    "",
    "P A R T E   G E R A L",
    "LIVRO I",
    "DAS PESSOAS",
    "",
    "TÍTULO I",
    "CAPÍTULO I",
    "DA PERSONALIDADE E DA CAPACIDADE",
    "Art. 1º Toda pessoa é capaz de direitos e deveres na ordem civil.",
    "Art. 2º A personalidade civil da pessoa começa do nascimento com vida;",
    "mas a lei põe a salvo, desde a concepção, os direitos do nascituro.",
    "Art. 3º (Revogado).",
]


def _records() -> list[ProvisionRecord]:
    return [
        ProvisionRecord("Art. 1º", "Toda pessoa é capaz.", ("PARTE GERAL", "CAPÍTULO I")),
        ProvisionRecord("Art. 70", "O domicílio ...", ("PARTE GERAL", "TÍTULO III")),
    ]


class TestParseCommand:
    """Tests for `cvx parse`."""

    def test_parse_text_file_to_json(self, tmp_path) -> None:
        src = tmp_path / "kodeks.txt"
        src.write_text("\n".join(SOURCE_LINES), encoding="utf-8")
        out = tmp_path / "civil_code.json"

        main(["parse", str(src), "--out", "json", "--json", str(out)])

        data = json.loads(out.read_text(encoding="utf-8"))
        assert [d["citation"] for d in data] == ["Art. 1º", "Art. 2º"]
        assert data[0]["sections"] == [
            "PARTE GERAL",
            "LIVRO I DAS PESSOAS",
            "TÍTULO I",
            "CAPÍTULO I DA PERSONALIDADE E DA CAPACIDADE",
        ]
        assert data[1]["content"].endswith("os direitos do nascituro.")
        assert set(data[0]) == {"citation", "content", "sections"}

    def test_default_json_path(self, tmp_path) -> None:
        src = tmp_path / "kodeks.txt"
        src.write_text("Art. 1º Texto.", encoding="utf-8")

        main(["parse", str(src)])

        assert (tmp_path / "kodeks.provisions.json").exists()

    def test_output_is_not_ascii_escaped(self, tmp_path) -> None:
        src = tmp_path / "kodeks.txt"
        src.write_text("CAPÍTULO I\nArt. 1º Ação.", encoding="utf-8")
        out = tmp_path / "out.json"

        main(["parse", str(src), "--json", str(out)])

        assert "CAPÍTULO I" in out.read_text(encoding="utf-8")

    def test_missing_file_exits(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["parse", str(tmp_path / "brak.txt")])
        assert exc.value.code == 1

    def test_show_prints_summary(self, tmp_path, capsys) -> None:
        src = tmp_path / "kodeks.txt"
        src.write_text("\n".join(SOURCE_LINES), encoding="utf-8")

        main(["parse", str(src), "--json", str(tmp_path / "o.json"), "--show", "--limit", "1"])

        assert "2 przepisów (pokazano 1)" in capsys.readouterr().out

    @pytest.mark.parametrize("limit", ["0", "-1", "abc"])
    def test_limit_must_be_positive(self, tmp_path, limit: str) -> None:
        """A non-positive --limit is rejected instead of hiding trailing rows."""
        src = tmp_path / "kodeks.txt"
        src.write_text("Art. 1º Texto.", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["parse", str(src), "--show", "--limit", limit])
        assert exc.value.code == 2
        assert not (tmp_path / "kodeks.provisions.json").exists()

    def test_positive_int(self) -> None:
        assert _positive_int("3") == 3
        with pytest.raises(argparse.ArgumentTypeError):
            _positive_int("-2")


class TestScrapeCommand:
    """Tests for `cvx scrape` with fetching replaced."""

    def test_scrape_writes_json(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict = {}

        def fake_fetch_lines(url, timeout=None, max_retries=3):
            seen.update(url=url, timeout=timeout, max_retries=max_retries)
            return SOURCE_LINES

        monkeypatch.setattr(html_mod, "fetch_lines", fake_fetch_lines)
        monkeypatch.delenv("CVX_URL", raising=False)
        out = tmp_path / "civil_code.json"

        main(["scrape", "--json", str(out), "--timeout", "7", "--retries", "1"])

        assert seen == {"url": html_mod.DEFAULT_URL, "timeout": 7.0, "max_retries": 1}
        assert len(json.loads(out.read_text(encoding="utf-8"))) == 2

    def test_fetch_error_exits(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken_fetch_lines(url, timeout=None, max_retries=3):
            raise OSError("offline")

        monkeypatch.setattr(html_mod, "fetch_lines", broken_fetch_lines)
        with pytest.raises(SystemExit) as exc:
            main(["scrape", "https://example.test/lei.htm", "--json", str(tmp_path / "x.json")])
        assert exc.value.code == 1
        assert not (tmp_path / "x.json").exists()

    def test_doc_id_from_url(self) -> None:
        assert _doc_id_from_url("https://www.planalto.gov.br/ccivil_03/Leis/2002/L10406.htm") == "L10406"
        assert _doc_id_from_url("https://example.test/") == "example-test"


class TestShowCommand:
    """Tests for `cvx show`."""

    def test_load_json(self, tmp_path) -> None:
        path = tmp_path / "cc.json"
        path.write_text(json.dumps([r.to_dict() for r in _records()], ensure_ascii=False), encoding="utf-8")
        assert _load_json(path) == _records()

    def test_load_json_rejects_non_list(self, tmp_path) -> None:
        path = tmp_path / "cc.json"
        path.write_text('{"citation": "Art. 1º"}', encoding="utf-8")
        with pytest.raises(ValueError):
            _load_json(path)

    def test_filter_by_section(self) -> None:
        assert [r.citation for r in _filter(_records(), "título iii")] == ["Art. 70"]
        assert _filter(_records(), None) == _records()

    def test_show_missing_file_exits(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["show", str(tmp_path / "brak.json")])
        assert exc.value.code == 1

    def test_show_invalid_json_exits(self, tmp_path) -> None:
        path = tmp_path / "cc.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["show", str(path)])

    def test_show_rejects_negative_limit(self, tmp_path) -> None:
        path = tmp_path / "cc.json"
        path.write_text(json.dumps([r.to_dict() for r in _records()], ensure_ascii=False), encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["show", str(path), "--limit", "-1"])
        assert exc.value.code == 2

    def test_show_limit(self, tmp_path, capsys) -> None:
        path = tmp_path / "cc.json"
        path.write_text(json.dumps([r.to_dict() for r in _records()], ensure_ascii=False), encoding="utf-8")
        main(["show", str(path), "--limit", "1"])
        assert "2 przepisów (pokazano 1)" in capsys.readouterr().out


class _FakeCursor:
    def __init__(self, rows: list[tuple] | None = None) -> None:
        self.executed: list[tuple] = []
        self.rows = rows or []

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None

    def execute(self, sql, params=None) -> None:
        self.executed.append((sql, params))

    def fetchall(self) -> list[tuple]:
        return self.rows


class _FakeConnection:
    def __init__(self, rows: list[tuple] | None = None) -> None:
        self.cur = _FakeCursor(rows)

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None

    def cursor(self) -> _FakeCursor:
        return self.cur


class TestDatabase:
    """Tests for the PostgreSQL sink and reset."""

    def test_write_db(self, monkeypatch: pytest.MonkeyPatch) -> None:
        conn = _FakeConnection()
        captured: dict = {}

        def fake_execute_values(cur, sql, rows):
            captured["sql"] = sql
            captured["rows"] = rows

        monkeypatch.setattr(db_mod, "get_connection", lambda: conn)
        monkeypatch.setattr(psycopg2.extras, "execute_values", fake_execute_values)

        _write_db(_records(), "L10406")

        assert "INSERT INTO provision" in captured["sql"]
        assert captured["rows"][0] == ("L10406", 0, "Art. 1º", "Toda pessoa é capaz.", ["PARTE GERAL", "CAPÍTULO I"])
        assert captured["rows"][1][1] == 1
        assert conn.cur.executed == [
            (db_mod.SCHEMA_SQL, None),
            ("DELETE FROM provision WHERE doc_id = %s AND seq >= %s", ("L10406", 2)),
        ]

    def test_schema_defines_provision_table(self) -> None:
        """The sink creates the table it upserts into, idempotently."""
        assert "CREATE TABLE IF NOT EXISTS provision" in db_mod.SCHEMA_SQL
        assert "PRIMARY KEY (doc_id, seq)" in db_mod.SCHEMA_SQL
        assert "sections   TEXT[]" in db_mod.SCHEMA_SQL

    def test_write_db_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def refuse():
            raise OSError("connection refused")

        monkeypatch.setattr(db_mod, "get_connection", refuse)
        with pytest.raises(SystemExit):
            _write_db(_records(), "L10406")

    def test_reset_counts_per_document(self) -> None:
        cur = _FakeCursor(rows=[("L10406",), ("L10406",), ("cc1916",)])
        assert _reset_provisions(cur, None) == Counter({"L10406": 2, "cc1916": 1})
        assert cur.executed == [("DELETE FROM provision RETURNING doc_id", None)]

    def test_reset_single_document(self) -> None:
        cur = _FakeCursor(rows=[("L10406",)])
        assert _reset_provisions(cur, "L10406") == Counter({"L10406": 1})
        assert cur.executed[0][1] == ("L10406",)

    def test_reset_command(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        conn = _FakeConnection(rows=[("L10406",), ("L10406",)])
        monkeypatch.setattr(db_mod, "get_connection", lambda: conn)

        main(["reset", "--doc-id", "L10406"])

        assert conn.cur.executed[0] == (db_mod.SCHEMA_SQL, None)
        assert "Usunięto 2 wierszy" in capsys.readouterr().out


class TestBuildParser:
    """Tests for sub-command registration."""

    @pytest.mark.parametrize("command", ["scrape", "parse", "show", "reset"])
    def test_commands_registered(self, command: str) -> None:
        argv = {
            "scrape": ["scrape"],
            "parse": ["parse", "x.txt"],
            "show": ["show", "x.json"],
            "reset": ["reset", "--doc-id", "L10406"],
        }[command]
        args = build_parser().parse_args(argv)
        assert args.command == command
        assert callable(args.func)

    def test_apply_schema_is_gone(self) -> None:
        """The table is created by the database sink, not a separate command."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["apply-schema"])
