# site_mirror/crawler/persister.py
"""
Page persister: writes a page's HTML, CSS and JS under fixed file names.
"""
from __future__ import annotations

from pathlib import Path
from typing import Final, Union

from site_mirror.errors import PersistenceError
from site_mirror.logger import logger

__all__ = ("HTML_FILE", "CSS_FILE", "JS_FILE", "ensure_dir", "write_html", "write_assets", "persist")

HTML_FILE: Final[str] = "index.html"
CSS_FILE: Final[str] = "styles.css"
JS_FILE: Final[str] = "scripts.js"

PathT = Union[str, Path]


def ensure_dir(directory: PathT) -> Path:
    """Create *directory* with all missing parents; an existing one is fine."""
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(path, exc.strerror or str(exc)) from exc
    return path


def _write(path: Path, content: str) -> Path:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(path, exc.strerror or str(exc)) from exc
    logger.debug("Saved %s (%d chars)", path, len(content))
    return path


def write_html(directory: PathT, html: str) -> Path:
    """Store the raw page markup; called before parsing so it survives a parse failure."""
    return _write(ensure_dir(directory) / HTML_FILE, html)


def write_assets(directory: PathT, css: str, js: str) -> None:
    """Store the aggregated stylesheet and script text of a page."""
    path = ensure_dir(directory)
    _write(path / CSS_FILE, css)
    _write(path / JS_FILE, js)


def persist(directory: PathT, html: str, css: str, js: str) -> Path:
    """Write all three files of a page, overwriting earlier content."""
    path = Path(directory)
    write_html(path, html)
    write_assets(path, css, js)
    return path
