"""Config loader - YAML serialization for dashboard settings.

Provides round-trip save/load so dashboard settings can be reviewed,
version-controlled, and edited as human-readable YAML files. Deal lists in
YAML are read by the ingestion layer like any other source.
"""

from pathlib import Path

import yaml

from .models import DashboardConfig


def save_config(config: DashboardConfig, path: str | Path) -> None:
    """Serialize a DashboardConfig to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def load_config(path: str | Path | None = None) -> DashboardConfig:
    """Deserialize a DashboardConfig from YAML, or return defaults if no path."""
    if path is None:
        return DashboardConfig()
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return DashboardConfig.from_dict(data)

