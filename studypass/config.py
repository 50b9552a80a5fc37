"""
studypass.config — YAML Configuration Loader
=============================================

Reads ``config.yaml`` for **infrastructure-only** settings (app identity,
API port, notification switch).  Secrets (``DATABASE_URL``, ``JWT_SECRET``)
come from the environment / ``.env``.  Reward amounts and the tier table
are code constants in :mod:`studypass.engine`.

Usage::

    from studypass.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.app_name)          # "StudyPass"
    print(cfg.api_port)          # 8000
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True, slots=True)
class StudyPassConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    app_name: str

    # API
    api_port: int

    # In-app notifications on level / tier changes
    notifications_enabled: bool = True

    # Optional
    frontend_url: str | None = None  # Default CORS origin


def load_config(path: str | Path = "config.yaml") -> StudyPassConfig:
    """Read *path* and return a :class:`StudyPassConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return StudyPassConfig(
        app_name=raw["app_name"],
        api_port=int(raw["api_port"]),
        notifications_enabled=bool(raw.get("notifications_enabled", True)),
        frontend_url=raw.get("frontend_url") or None,
    )
