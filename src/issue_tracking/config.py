"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "issue_tracking.toml"
DEFAULT_DATA_DIR_NAME = ".issue_tracking"
DEFAULT_AUDIT_FILE_NAME = "tracking_audit.jsonl"

_TRACKING_FIELDS = ("match_file_level_issues", "inherit_server_severity")
_AUDIT_FIELDS = ("enabled", "path")


@dataclass(slots=True, frozen=True)
class TrackingSettings:
    """Matching behavior toggles."""

    match_file_level_issues: bool = True
    inherit_server_severity: bool = True


@dataclass(slots=True, frozen=True)
class AuditSettings:
    """Tracking audit log settings."""

    enabled: bool = False
    path: Path | None = None


@dataclass(slots=True, frozen=True)
class TrackerConfig:
    """Fully merged tracker configuration."""

    project_root: Path
    data_dir: Path
    tracking: TrackingSettings
    audit: AuditSettings

    @property
    def audit_path(self) -> Path:
        """Return the effective audit log location."""
        if self.audit.path is not None:
            return self.audit.path
        return self.data_dir / DEFAULT_AUDIT_FILE_NAME

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "project_root": str(self.project_root),
            "data_dir": str(self.data_dir),
            "tracking": {
                "match_file_level_issues": self.tracking.match_file_level_issues,
                "inherit_server_severity": self.tracking.inherit_server_severity,
            },
            "audit": {
                "enabled": self.audit.enabled,
                "path": str(self.audit_path),
            },
        }


@dataclass(slots=True, frozen=True)
class ConfigOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    match_file_level_issues: bool | None = None
    inherit_server_severity: bool | None = None
    audit_enabled: bool | None = None
    audit_path: Path | None = None


def default_config(project_root: Path) -> TrackerConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return TrackerConfig(
        project_root=resolved_root,
        data_dir=resolved_root / DEFAULT_DATA_DIR_NAME,
        tracking=TrackingSettings(),
        audit=AuditSettings(),
    )


def load_config_file(project_root: Path) -> dict[str, object]:
    """Load optional issue_tracking.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _reject_unknown_fields(
    table: dict[str, object], section: str, known: tuple[str, ...]
) -> None:
    for key in sorted(table.keys()):
        if key not in known:
            raise ValueError(f"Config field '{section}.{key}' is not supported.")


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_path(value: object, name: str, base: Path, default: Path | None) -> Path | None:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    path = Path(value)
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def merge_config(
    base: TrackerConfig, file_payload: dict[str, object], overrides: ConfigOverrides
) -> TrackerConfig:
    """Merge defaults, config file, then startup overrides."""
    tracking_payload = _get_table(file_payload, "tracking")
    audit_payload = _get_table(file_payload, "audit")
    _reject_unknown_fields(tracking_payload, "tracking", _TRACKING_FIELDS)
    _reject_unknown_fields(audit_payload, "audit", _AUDIT_FIELDS)

    tracking = TrackingSettings(
        match_file_level_issues=_optional_bool(
            tracking_payload.get("match_file_level_issues"),
            "tracking.match_file_level_issues",
            base.tracking.match_file_level_issues,
        ),
        inherit_server_severity=_optional_bool(
            tracking_payload.get("inherit_server_severity"),
            "tracking.inherit_server_severity",
            base.tracking.inherit_server_severity,
        ),
    )
    audit = AuditSettings(
        enabled=_optional_bool(audit_payload.get("enabled"), "audit.enabled", base.audit.enabled),
        path=_optional_path(
            audit_payload.get("path"), "audit.path", base.project_root, base.audit.path
        ),
    )
    merged = TrackerConfig(
        project_root=base.project_root,
        data_dir=base.data_dir,
        tracking=tracking,
        audit=audit,
    )
    return apply_overrides(merged, overrides)


def apply_overrides(config: TrackerConfig, overrides: ConfigOverrides) -> TrackerConfig:
    """Apply startup overrides at highest precedence."""
    tracking = TrackingSettings(
        match_file_level_issues=_optional_bool(
            overrides.match_file_level_issues,
            "overrides.match_file_level_issues",
            config.tracking.match_file_level_issues,
        ),
        inherit_server_severity=_optional_bool(
            overrides.inherit_server_severity,
            "overrides.inherit_server_severity",
            config.tracking.inherit_server_severity,
        ),
    )
    audit = AuditSettings(
        enabled=_optional_bool(overrides.audit_enabled, "overrides.audit_enabled", config.audit.enabled),
        path=overrides.audit_path.resolve() if overrides.audit_path is not None else config.audit.path,
    )
    data_dir = overrides.data_dir or config.data_dir
    return TrackerConfig(
        project_root=config.project_root,
        data_dir=data_dir.resolve(),
        tracking=tracking,
        audit=audit,
    )


def load_effective_config(
    project_root: Path, overrides: ConfigOverrides | None = None
) -> TrackerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or ConfigOverrides())
