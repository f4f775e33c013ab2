"""Settings loader: parse and validate chromakit.yaml."""

from __future__ import annotations

from pathlib import Path

import yaml

from contracts.settings import ClientSettings


def load_settings(path: str | Path) -> ClientSettings:
    """Load a chromakit.yaml file and return validated ClientSettings."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    raw = p.read_text(encoding="utf-8")
    data = yaml.safe_load(raw)
    if data is None:
        return ClientSettings()
    if not isinstance(data, dict):
        raise ValueError(f"Settings must be a YAML mapping, got {type(data).__name__}")

    return ClientSettings(**data)
