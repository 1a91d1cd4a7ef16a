# File: site_mirror/report.py
"""site_mirror.report: run summary of a mirror and its JSON export."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from site_mirror.crawler.models import PageFailure, PageResult

__all__ = ["MirrorReport", "render_json"]


@dataclass(slots=True)
class MirrorReport:
    """Pages mirrored and pages abandoned during one run."""

    root_url: str
    output_dir: Path
    pages: List[PageResult] = field(default_factory=list)
    failures: List[PageFailure] = field(default_factory=list)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def root_failed(self) -> bool:
        return any(f.url == self.root_url for f in self.failures)

    @property
    def asset_failure_count(self) -> int:
        return sum(len(p.asset_failures) for p in self.pages)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return json.loads(json.dumps(data, default=str))


def render_json(report: MirrorReport, output_path: Union[Path, str]) -> Path:
    """
    Save *report* as JSON at *output_path*, creating parent directories.

    Example:
    ```python
    from site_mirror.report import render_json
    report_path = render_json(report, "reports/mirror.json")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
    return output
