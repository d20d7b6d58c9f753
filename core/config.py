from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
PREFERENCES_FILE_NAME = "preferences.json"
ENV_DATA_DIR = "CHIP_SALES_DATA_DIR"
ENV_DB_URL = "CHIP_SALES_DB_URL"
ENV_STORE_REQUIRED = "CHIP_SALES_STORE_REQUIRED"
SESSION_DATA_DIR = "chip_sales_data_dir"

CHIP_TYPES = ("ショートオーバル", "ベリーショート")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_url: str
    currency: str = "JPY"
    store_required: bool = True
    chip_types: tuple = CHIP_TYPES
    ledger_limit: int = 500
    dashboard_limit: int = 2000

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / PREFERENCES_FILE_NAME


def _default_data_dir() -> Path:
    return Path.home() / ".chip_sales"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
    return {}


def _parse_bool(v: Optional[str], default: bool) -> bool:
    if v is None or not v.strip():
        return default
    return v.strip().lower() not in {"0", "false", "no", "off"}


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    payload = {"data_dir": str(data_dir)}
    for cfg in {data_dir / CONFIG_FILE_NAME, _default_data_dir() / CONFIG_FILE_NAME}:
        cfg.parent.mkdir(parents=True, exist_ok=True)
        cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state[SESSION_DATA_DIR] = str(data_dir)


def resolve_settings(env: Mapping[str, str], session: Mapping[str, object]) -> Settings:
    # Priority order for the data directory:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    if session.get(SESSION_DATA_DIR):
        data_dir = Path(str(session[SESSION_DATA_DIR])).expanduser().resolve()
    elif env.get(ENV_DATA_DIR):
        data_dir = Path(env[ENV_DATA_DIR]).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)

    # An explicit endpoint wins over the data directory; it is not opened here.
    db_url = (env.get(ENV_DB_URL) or "").strip() or str(data_dir / "app.db")

    return Settings(
        data_dir=data_dir,
        db_url=db_url,
        store_required=_parse_bool(env.get(ENV_STORE_REQUIRED), True),
    )


@st.cache_resource
def get_settings() -> Settings:
    return resolve_settings(os.environ, st.session_state)
