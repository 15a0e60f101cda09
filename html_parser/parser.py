"""html_parser/parser.py — pobieranie strony kodeksu i spłaszczanie jej do linii tekstu."""

from __future__ import annotations

import os
import re
import sys
import time
from pathlib import Path

import requests
from bs4 import BeautifulSoup, NavigableString, Tag

DEFAULT_URL     = "https://www.planalto.gov.br/ccivil_03/Leis/2002/L10406.htm"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3

_ENV_URL     = "CVX_URL"
_ENV_TIMEOUT = "CVX_HTTP_TIMEOUT"

# Tagi blokowe (każdy zaczyna i kończy linię, jak w innerText przeglądarki)
_BLOCK_TAGS: set[str] = {
    "div", "p", "article", "section", "main", "aside", "nav",
    "header", "footer", "blockquote", "center",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "li", "ul", "ol", "dl", "dt", "dd",
    "table", "tr", "td", "th", "caption",
    "form", "fieldset", "details", "summary", "pre", "hr",
}

# Bloki z marginesem: pusta linia przed i po (innerText)
_PARAGRAPH_TAGS = {"p", "h1", "h2", "h3", "h4", "h5", "h6"}

# Tagi zawierające szum (nie treść)
_NOISE_TAGS = {"script", "style", "noscript", "head", "title", "meta"}

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
}

# Białe znaki wewnątrz tekstu węzła (nowe linie w źródle HTML to zwykłe spacje)
_INLINE_WS_RE = re.compile(r"[ \t\r\n\f\v]+")


def default_url() -> str:
    return os.getenv(_ENV_URL) or DEFAULT_URL


def default_timeout() -> float:
    raw = os.getenv(_ENV_TIMEOUT)
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Nieprawidłowa wartość {_ENV_TIMEOUT}: '{raw}'") from e


# ---------------------------------------------------------------------------
# HTML → linie
# ---------------------------------------------------------------------------

def _render_lines(body: Tag) -> list[str]:
    """
    Przechodzi drzewo DOM i zwraca linie tekstu w kolejności czytania.

    Przybliżenie innerText przeglądarki:
    - <p> i nagłówki h1–h6: pusta linia przed i po treści.
    - Pozostałe bloki (div, td, li …): nowa linia przed i po treści.
    - <br>: wymuszona nowa linia.
    - Tekst inline: białe znaki zwijane do jednej spacji (bez przycinania,
      więc rozstrzelone "P A R T E" zostaje rozstrzelone).
    """
    chunks: list[str] = []
    pending = 0  # wymagana liczba \n przed kolejnym tekstem

    def require(n: int) -> None:
        nonlocal pending
        pending = max(pending, n)

    def emit(text: str) -> None:
        nonlocal pending
        if pending and chunks:
            chunks.append("\n" * pending)
        pending = 0
        chunks.append(text)

    def walk(el: Tag) -> None:
        for child in el.children:
            if isinstance(child, NavigableString):
                if type(child) is not NavigableString:
                    continue  # komentarze, CDATA, doctype
                text = _INLINE_WS_RE.sub(" ", str(child))
                if not text:
                    continue
                # odstęp między blokami (formatowanie źródła HTML) nie jest treścią
                if text == " " and (pending or not chunks or chunks[-1].endswith(("\n", " "))):
                    continue
                emit(text)
            elif isinstance(child, Tag):
                name = child.name
                if name in _NOISE_TAGS:
                    continue
                if name == "br":
                    emit("\n")
                elif name in _BLOCK_TAGS:
                    gap = 2 if name in _PARAGRAPH_TAGS else 1
                    require(gap)
                    walk(child)
                    require(gap)
                else:
                    walk(child)

    walk(body)
    return "".join(chunks).split("\n") if chunks else []


def extract_lines(html: str) -> list[str]:
    """Zamienia dokument HTML na listę linii tekstu (jak body.innerText.split("\\n"))."""
    soup = BeautifulSoup(html, "html.parser")
    body: Tag = soup.find("body") or soup  # type: ignore[assignment]
    return _render_lines(body)


# ---------------------------------------------------------------------------
# Pobieranie
# ---------------------------------------------------------------------------

def _is_retryable(error: requests.RequestException) -> bool:
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    response = getattr(error, "response", None)
    return response is not None and response.status_code >= 500


def fetch_html(
    url: str,
    timeout: float | None = None,
    max_retries: int = DEFAULT_RETRIES,
) -> str:
    """
    Pobiera stronę i zwraca jej tekst HTML.

    Błędy połączenia, timeout i odpowiedzi 5xx są ponawiane
    (do max_retries razy, z rosnącym odstępem). Pozostałe błędy HTTP
    (4xx) są zgłaszane od razu.

    Raises:
        requests.RequestException: Nieodwracalny błąd pobierania.
    """
    timeout = default_timeout() if timeout is None else timeout
    attempt = 0

    while True:
        try:
            resp = requests.get(url, timeout=timeout, headers=_HEADERS)
            resp.raise_for_status()
            resp.encoding = resp.apparent_encoding or "utf-8"
            return resp.text

        except requests.RequestException as exc:
            if not _is_retryable(exc):
                raise
            attempt += 1
            if attempt > max_retries:
                raise

            delay = 2 ** attempt
            print(
                f"[warn] {exc.__class__.__name__} — czekam {delay}s "
                f"(próba {attempt}/{max_retries})...",
                file=sys.stderr,
            )
            time.sleep(delay)


def fetch_lines(
    url: str,
    timeout: float | None = None,
    max_retries: int = DEFAULT_RETRIES,
) -> list[str]:
    """Pobiera stronę pod URL i zwraca kompletną listę jej linii tekstu."""
    return extract_lines(fetch_html(url, timeout=timeout, max_retries=max_retries))


def read_lines(path: str | Path) -> list[str]:
    """
    Czyta lokalny plik źródłowy.

    .htm / .html → linie jak przy fetch_lines(); inne → linie pliku tekstowego.
    Pliki HTML z planalto.gov.br bywają w windows-1252, stąd fallback kodowania.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Plik nie istnieje: {path}")

    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("cp1252")

    if path.suffix.lower() in (".htm", ".html"):
        return extract_lines(text)
    return text.splitlines()
