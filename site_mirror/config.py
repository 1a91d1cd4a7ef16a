# === FILE: site_mirror/config.py ===
"""
Loading and validation of the SiteMirror configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

__all__ = ("MirrorConfig", "load_config", "read_config_data", "build_config")

_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


class MirrorConfig(BaseModel):
    """Configuration of a single mirroring run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    root_url: str = Field(..., description="Absolute http(s) URL the mirror starts from, kept as given.")
    output_dir: Path = Field(Path("output"), description="Directory receiving the mirrored pages.")
    strategy: Literal["worklist", "recursive"] = Field(
        "worklist", description="Worklist with visited set, or plain recursive descent."
    )
    scope: Literal["origin", "prefix"] = Field(
        "origin", description="Links followed: same origin, or URL string prefix of the page."
    )
    naming: Literal["hashed", "relative"] = Field(
        "hashed", description="Child directory names: URL digest, or link relative to the parent."
    )
    concurrency: int = Field(4, ge=1, description="Pages fetched in parallel by the worklist.")
    max_depth: Optional[int] = Field(None, ge=0, description="Link depth limit, None for unlimited.")
    max_pages: Optional[int] = Field(None, ge=1, description="Page limit, None for unlimited.")
    timeout: float = Field(30.0, gt=0, description="Timeout of one request (seconds).")
    user_agent: Optional[str] = Field(None, min_length=1, description="User-Agent header, client default if unset.")
    strict_status: bool = Field(True, description="Treat non-2xx answers as fetch errors.")
    retry_times: int = Field(0, ge=0, description="Retries on 5xx/429 and connection errors.")

    @field_validator("root_url", mode="before")
    def _strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("root_url")
    def _check_http_url(cls, v: str) -> str:
        # validated as HttpUrl, stored verbatim: pydantic would append "/" to a bare origin
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError as exc:
            raise ValueError(f"not an absolute http(s) URL: {v!r}") from exc
        return v

    @property
    def root(self) -> str:
        """Root URL as the string used for resolution and prefix checks."""
        return self.root_url


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_data(path: Union[str, Path, None]) -> dict[str, Any]:
    """Read a YAML or JSON file into a plain mapping; *None* gives an empty one."""
    if path is None:
        return {}
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def build_config(data: Dict[str, Any], **overrides: Any) -> MirrorConfig:
    """Validate *data* with the non-None *overrides* applied on top."""
    merged = dict(data)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return MirrorConfig(**merged)


def load_config(path: Union[str, Path], **overrides: Any) -> MirrorConfig:
    """
    Read YAML or JSON and return a validated MirrorConfig.
    Raises FileNotFoundError when the file is missing.
    """
    return build_config(read_config_data(path), **overrides)
