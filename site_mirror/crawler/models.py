"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal

AssetKind = Literal["stylesheet", "script"]


@dataclass(slots=True)
class AssetFailure:
    """An external stylesheet or script that contributed nothing to the page."""

    url: str
    kind: AssetKind
    reason: str


@dataclass(slots=True)
class PageAssets:
    """Aggregated CSS and JS of one page plus the links worth following."""

    css: str = ""
    js: str = ""
    links: List[str] = field(default_factory=list)
    failures: List[AssetFailure] = field(default_factory=list)


@dataclass(slots=True)
class PageResult:
    """A page mirrored successfully."""

    url: str
    directory: Path
    depth: int
    links: List[str] = field(default_factory=list)
    asset_failures: List[AssetFailure] = field(default_factory=list)


@dataclass(slots=True)
class PageFailure:
    """A page whose visit was abandoned; its descendants were not discovered through it."""

    url: str
    directory: Path
    kind: str
    error: str
