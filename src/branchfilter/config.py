"""Load and validate branch filter configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]

from branchfilter.types import DEFAULT_ALLOW_LIST, FilterConfig

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = ".branchfilter.yaml"

CONFIG_REASON_MISSING = "CONFIG_MISSING"
CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"

# Keep this literal deterministic and sorted in write path.
CONFIG_TEMPLATE: dict[str, Any] = {
    "inactivity_days": 0,
    "allow_list": DEFAULT_ALLOW_LIST.split("\n"),
    "deny_list": [],
}


class FilterConfigError(ValueError):
    """Branch filter configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def config_path_for_repo(repo_root: Path) -> Path:
    """Return canonical config file path for a repository."""
    return repo_root.resolve() / CONFIG_FILENAME


def write_default_config(repo_root: Path, *, force: bool = False) -> Path:
    """Create default config YAML deterministically."""
    output_path = config_path_for_repo(repo_root)
    if output_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    rendered = yaml.safe_dump(CONFIG_TEMPLATE, sort_keys=True)
    output_path.write_text(rendered, encoding="utf-8")
    return output_path


def load_config(
    path: Path,
    *,
    required: bool = False,
    inactivity_days: int | None = None,
    allow_list: str | None = None,
    deny_list: str | None = None,
) -> FilterConfig:
    """Load config from ``path`` and apply overrides.

    A missing file yields defaults unless ``required`` is set, in which case
    it is a ``CONFIG_MISSING`` error.
    """
    raw: dict[str, Any] = {}
    if required and not path.exists():
        raise FilterConfigError(f"Missing branch filter config at {path}", CONFIG_REASON_MISSING)
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise FilterConfigError(f"{path.name} parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise FilterConfigError(
                f"{path.name} parse error: expected mapping at top level",
                CONFIG_REASON_PARSE_ERROR,
            )
        raw = loaded

    days = _normalize_days(raw.get("inactivity_days", 0)) if inactivity_days is None else inactivity_days
    allow = _normalize_list_text(raw.get("allow_list"), "allow_list") if allow_list is None else allow_list
    deny = _normalize_list_text(raw.get("deny_list"), "deny_list") if deny_list is None else deny_list

    return FilterConfig.create(days, allow, deny)


def _normalize_days(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FilterConfigError(f"inactivity_days must be an integer, got `{value!r}`")
    return max(0, value)


def _normalize_list_text(value: Any, field_name: str) -> str | None:
    """Accept list text or a list of strings; None keeps the default."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if not isinstance(value, list):
        raise FilterConfigError(f"{field_name} must be a string or a list of strings")

    entries: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise FilterConfigError(f"{field_name} must be a string or a list of strings")
        entries.append(item)
    return "\n".join(entries)
