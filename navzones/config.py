#==============================================================================
# NavZones - Configuration and Persistence
#==============================================================================
# File: config.py
# Description: Dataclass settings, YAML load/save, and the config store that
#              owns the dead zone registry and persists it on change
# Date: October 2026
#==============================================================================

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .logging_utils import NavLogger
from .zones.zone_data import DEFAULT_ZONE_RADIUS
from .zones.zone_registry import ZoneRegistry


@dataclass
class QueryConfig:
    """Path query settings."""
    # Half size of the box searched around start/end points
    search_half_extents: list[float] = field(default_factory=lambda: [0.5, 0.5, 0.5])
    # Node budget per corridor search
    max_search_nodes: int = 2048


@dataclass
class NavZonesConfig:
    """
    Persisted settings.

    ``dead_zones`` holds the registry's persistence form:
    region -> [[x, y, z, radius], ...] in list order.
    """
    show_dead_zones: bool = False
    default_radius: float = DEFAULT_ZONE_RADIUS
    autosave: bool = True
    query: QueryConfig = field(default_factory=QueryConfig)
    dead_zones: dict[int, list[list[float]]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "show_dead_zones": self.show_dead_zones,
            "default_radius": self.default_radius,
            "autosave": self.autosave,
            "query": {
                "search_half_extents": list(self.query.search_half_extents),
                "max_search_nodes": self.query.max_search_nodes,
            },
            "dead_zones": {
                int(region): [list(entry) for entry in entries]
                for region, entries in self.dead_zones.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "NavZonesConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")
        query_data = data.get("query", {}) or {}
        return cls(
            show_dead_zones=bool(data.get("show_dead_zones", False)),
            default_radius=float(data.get("default_radius", DEFAULT_ZONE_RADIUS)),
            autosave=bool(data.get("autosave", True)),
            query=QueryConfig(**query_data),
            dead_zones={
                int(region): [list(entry) for entry in (entries or [])]
                for region, entries in (data.get("dead_zones", {}) or {}).items()
            },
        )

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path) -> "NavZonesConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(yaml.safe_load(f))

    def validate(self) -> list[str]:
        """
        Validate configuration, return list of issues.

        Returns empty list if valid.
        """
        issues = []
        if self.default_radius <= 0:
            issues.append(f"default_radius must be > 0, got {self.default_radius}")
        if len(self.query.search_half_extents) != 3:
            issues.append("query.search_half_extents needs exactly 3 values")
        elif any(e <= 0 for e in self.query.search_half_extents):
            issues.append("query.search_half_extents values must be > 0")
        if self.query.max_search_nodes < 1:
            issues.append("query.max_search_nodes must be at least 1")
        for region, entries in self.dead_zones.items():
            if not 0 <= region <= 0xFFFF:
                issues.append(f"Region key {region} outside u16 range")
            for i, entry in enumerate(entries):
                if len(entry) != 4:
                    issues.append(f"Zone {i} of region {region} needs [x, y, z, radius]")
                elif entry[3] <= 0:
                    issues.append(f"Zone {i} of region {region} has radius {entry[3]}")
        return issues


class ConfigStore:
    """
    Owns the settings and the zone registry built from them.

    The registry reports every mutation here; the store writes the file at
    once when ``autosave`` is on, otherwise marks itself dirty until
    ``flush()``.
    """

    MODULE_NAME = "ConfigStore"

    def __init__(
        self,
        config: Optional[NavZonesConfig] = None,
        path: Optional[Path] = None,
        logger: Optional[NavLogger] = None,
    ):
        self.logger = logger or NavLogger(self.MODULE_NAME)
        self.config = config or NavZonesConfig()
        self.path = Path(path) if path else None
        self.dirty = False
        self.save_count = 0

        self.registry = ZoneRegistry(on_change=self.notify_modified)
        self.registry.load_from_dict(self.config.dead_zones)
        self.logger.log_init(path=self.path, zones=len(self.registry))

    @classmethod
    def open(cls, path: Path, logger: Optional[NavLogger] = None) -> "ConfigStore":
        """Load the store from ``path``, or start empty if it does not exist."""
        path = Path(path)
        config = NavZonesConfig.load(path) if path.exists() else NavZonesConfig()
        return cls(config=config, path=path, logger=logger)

    def notify_modified(self, region: Any = None) -> None:
        """Registry change hook: persist now or mark dirty."""
        self.dirty = True
        if self.config.autosave:
            self.flush()

    def flush(self) -> bool:
        """
        Write pending changes.

        Returns:
            True if a file was written
        """
        self.config.dead_zones = self.registry.to_dict()
        if not self.dirty or self.path is None:
            return False
        try:
            self.config.save(self.path)
        except OSError as e:
            self.logger.error(
                "Failed to save configuration",
                reason=str(e),
                suggested_fix="Check that the config directory is writable",
                path=self.path,
            )
            return False
        self.dirty = False
        self.save_count += 1
        self.logger.debug("Configuration saved", path=self.path)
        return True


def load_or_create_config(config_path: Optional[Path] = None) -> NavZonesConfig:
    """Load config from file or create default."""
    if config_path and Path(config_path).exists():
        return NavZonesConfig.load(config_path)
    return NavZonesConfig()
