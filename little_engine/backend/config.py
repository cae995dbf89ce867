"""Runtime configuration read from environment variables (.env is loaded by __main__)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .loaders import default_scenario_path


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def _env_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value else default
    except ValueError:
        return default


def _env_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    scenario_path: Path
    save_dir: Path = Path(".little_engine")

    # LLM
    llm_provider: str = "openrouter"
    api_key: str = ""
    model: str = ""
    base_url: str = "https://openrouter.ai/api/v1"

    # 倒计时刷新间隔（秒）
    tick_seconds: float = 1.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # Logging
    log_level: str = "INFO"
    log_format_json: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        tick = _env_float(env.get("TICK_SECONDS"), 1.0)
        return cls(
            scenario_path=Path(env.get("SCENARIO_PATH") or default_scenario_path()),
            save_dir=Path(env.get("SAVE_DIR") or ".little_engine"),
            llm_provider=env.get("LLM_PROVIDER") or "openrouter",
            api_key=env.get("API_KEY", ""),
            model=env.get("MODEL", ""),
            base_url=env.get("BASE_URL") or "https://openrouter.ai/api/v1",
            # 超过 10 秒倒计时就不准了
            tick_seconds=min(max(tick, 0.1), 10.0),
            host=env.get("HOST") or "0.0.0.0",
            port=_env_int(env.get("PORT"), 8000),
            reload=_env_bool(env.get("RELOAD"), False),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            log_format_json=_env_bool(env.get("LOG_FORMAT_JSON"), False),
        )
