# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-10] Config loading (defaults/file/env)
# [NAV-20] Overrides
# [NAV-99] End
# =============================================================================

# === [NAV-00] Imports / constants ============================================
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from mapper_bus import topics

CONFIG_ENV = "MAPPER_CONFIG"
CONFIG_PATH = Path("/etc/mapper/config.json")
BUS_KINDS = (topics.BUS_SYSTEM, topics.BUS_SESSION)
_DEFAULT_CONFIG = {
    "bus": topics.BUS_SYSTEM,
    "poll_interval": 1.0,
    "log_level": "WARNING",
    "log_path": None,
}


@dataclass(frozen=True)
class MapperConfig:
    bus: str = topics.BUS_SYSTEM
    poll_interval: float = 1.0
    log_level: str = "WARNING"
    log_path: Optional[str] = None


# === [NAV-10] Config loading (defaults/file/env) =============================
def resolve_config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_raw_config(path: Optional[Path] = None) -> Dict:
    target = resolve_config_path(path)
    if not target.exists():
        return _DEFAULT_CONFIG.copy()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except Exception:
        return _DEFAULT_CONFIG.copy()
    if not isinstance(data, dict):
        return _DEFAULT_CONFIG.copy()
    for key, value in _DEFAULT_CONFIG.items():
        data.setdefault(key, value)
    return data


def load_config(path: Optional[Path] = None) -> MapperConfig:
    data = load_raw_config(path)
    bus = str(data.get("bus") or topics.BUS_SYSTEM)
    if bus not in BUS_KINDS:
        bus = topics.BUS_SYSTEM
    try:
        poll_interval = float(data.get("poll_interval"))
    except (TypeError, ValueError):
        poll_interval = _DEFAULT_CONFIG["poll_interval"]
    if poll_interval <= 0:
        poll_interval = _DEFAULT_CONFIG["poll_interval"]
    log_path = data.get("log_path")
    return MapperConfig(
        bus=bus,
        poll_interval=poll_interval,
        log_level=str(data.get("log_level") or "WARNING").upper(),
        log_path=str(log_path) if log_path else None,
    )


# === [NAV-20] Overrides ======================================================
def with_overrides(
    config: MapperConfig,
    *,
    bus: Optional[str] = None,
    poll_interval: Optional[float] = None,
    log_level: Optional[str] = None,
) -> MapperConfig:
    updates: Dict[str, object] = {}
    if bus:
        updates["bus"] = bus
    if poll_interval is not None and poll_interval > 0:
        updates["poll_interval"] = float(poll_interval)
    if log_level:
        updates["log_level"] = log_level.upper()
    return replace(config, **updates)


# === [NAV-99] End =============================================================
__all__ = [
    "CONFIG_ENV",
    "CONFIG_PATH",
    "BUS_KINDS",
    "MapperConfig",
    "resolve_config_path",
    "load_raw_config",
    "load_config",
    "with_overrides",
]
