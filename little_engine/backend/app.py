"""FastAPI entry point for the mystery game."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .ai import get_llm_client
from .config import Settings
from .exceptions import CharacterNotFoundError, LittleEngineError, ScenarioLoadError
from .game_manager import GameManager
from .loaders import load_scenario
from .storage import GameStore, JsonFileStorage
from .systems import system_clock

logger = logging.getLogger(__name__)


# ============================================================
# 请求模型
# ============================================================

class OpenConversationRequest(BaseModel):
    character_id: str


class MessageRequest(BaseModel):
    content: str


class AccuseRequest(BaseModel):
    suspect: str


# ============================================================
# 启动
# ============================================================

def build_manager(settings: Settings) -> GameManager:
    """按配置加载场景并创建 GameManager；场景加载失败时抛出 ScenarioLoadError"""
    scenario = load_scenario(settings.scenario_path)
    store = GameStore(JsonFileStorage(settings.save_dir), clock=system_clock)
    return GameManager(scenario, store, get_llm_client(settings))


async def run_ticker(manager: GameManager, interval: float) -> None:
    """独立于对话请求运行的时间线索计时器"""
    while True:
        await asyncio.sleep(interval)
        try:
            manager.tick()
        except Exception:
            logger.exception("Tick failed, retrying on the next interval")


def create_app(
    manager_factory: Optional[Callable[[], GameManager]] = None,
    tick_seconds: Optional[float] = None,
) -> FastAPI:
    settings: Optional[Settings] = None
    if manager_factory is None or tick_seconds is None:
        settings = Settings.from_env()
    factory = manager_factory or (lambda: build_manager(settings))
    interval = tick_seconds if tick_seconds is not None else settings.tick_seconds

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.manager = factory()
        except ScenarioLoadError as e:
            logger.critical("Cannot start the game, scenario failed to load: %s", e)
            raise
        ticker = asyncio.create_task(run_ticker(app.state.manager, interval))
        try:
            yield
        finally:
            ticker.cancel()
            try:
                await ticker
            except asyncio.CancelledError:
                pass

    app = FastAPI(title="Little Engine Mystery", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LittleEngineError)
    async def handle_game_error(request: Request, exc: LittleEngineError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    def get_manager(request: Request) -> GameManager:
        return request.app.state.manager

    # ============================================================
    # API 端点
    # ============================================================

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/state")
    async def get_state(request: Request) -> Dict[str, Any]:
        """获取游戏状态"""
        return get_manager(request).get_game_state_snapshot()

    @app.get("/api/characters")
    async def get_characters(request: Request) -> List[Dict[str, Any]]:
        return get_manager(request).get_characters()

    @app.get("/api/conversations/{character_id}")
    async def get_conversation(request: Request, character_id: str) -> Dict[str, Any]:
        manager = get_manager(request)
        if not manager.scenario.get_character(character_id):
            raise CharacterNotFoundError(character_id)
        return {"character_id": character_id, "history": manager.get_history(character_id)}

    @app.post("/api/conversation/open")
    async def open_conversation(request: Request, body: OpenConversationRequest) -> Dict[str, Any]:
        """进入审讯室"""
        return get_manager(request).open_conversation(body.character_id)

    @app.post("/api/conversation/close")
    async def close_conversation(request: Request) -> Dict[str, Any]:
        get_manager(request).close_conversation()
        return {"active_character": None}

    @app.post("/api/conversation/message")
    async def send_message(request: Request, body: MessageRequest) -> Dict[str, Any]:
        """发送消息"""
        manager = get_manager(request)
        result = await manager.send_message(body.content)
        return {
            "result": result.to_dict() if result else None,
            "evidence": manager.get_visible_evidence(),
        }

    @app.get("/api/evidence")
    async def get_evidence(request: Request) -> List[Dict[str, Any]]:
        return get_manager(request).get_visible_evidence()

    @app.get("/api/time-clues")
    async def get_time_clues(request: Request) -> List[Dict[str, Any]]:
        return get_manager(request).get_time_clues()

    @app.get("/api/time-clues/{clue_id}")
    async def read_time_clue(request: Request, clue_id: str) -> Dict[str, Any]:
        return get_manager(request).read_time_clue(clue_id)

    @app.post("/api/accuse")
    async def accuse(request: Request, body: AccuseRequest) -> Dict[str, Any]:
        """指认犯人"""
        return get_manager(request).accuse(body.suspect).to_dict()

    @app.post("/api/reset")
    async def reset_game(request: Request) -> Dict[str, Any]:
        """重置游戏"""
        manager = get_manager(request)
        manager.reset()
        return manager.get_game_state_snapshot()

    return app


app = create_app()
