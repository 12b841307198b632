# settings.py
from __future__ import annotations
import json, os, sys
from pathlib import Path
from typing import Any, Dict

_DEFAULTS: Dict[str, Any] = {
    "max_workers": None,             # None → uma thread por ficheiro
    "buffer_size": 4 * 1024 * 1024,
    "queue_size": 1,
}
_DATA: Dict[str, Any] = {}


def path() -> Path:
    env = os.environ.get("CHECKSUM_SETTINGS")
    return Path(env) if env else Path(__file__).with_name("settings.json")

def load() -> None:
    global _DATA
    cfg = path()
    _DATA = {}
    if cfg.exists():
        try:
            data = json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            print(f"[settings] warning: ignoring {cfg}: {exc}", file=sys.stderr)
            return
        if isinstance(data, dict):
            _DATA = data

def get(key: str, default: Any = None) -> Any:
    if key in _DATA:
        return _DATA[key]
    return _DEFAULTS.get(key, default)

load()
