"""Entry point for running the backend server."""

import logging
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv

from .config import Settings
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def load_env() -> Optional[Path]:
    """加载 .env 文件（优先从 backend 目录，其次从项目根目录）"""
    backend_dir = Path(__file__).parent
    for env_file in (backend_dir / ".env", backend_dir.parent.parent / ".env"):
        if env_file.exists():
            load_dotenv(env_file)
            return env_file
    return None


def main() -> None:
    env_file = load_env()
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_format_json)
    if env_file:
        logger.info("Loaded environment from %s", env_file)
    else:
        logger.warning("No .env file found, using process environment only")

    uvicorn.run(
        "little_engine.backend.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
