"""LLM client - 角色对话的后端，默认通过 OpenRouter 访问模型。"""

from __future__ import annotations

import abc
import logging
from typing import Any, Dict, List, Sequence, TYPE_CHECKING

from openai import AsyncOpenAI, OpenAIError

from ..exceptions import ChatError
from ..models import ConversationTurn, TurnRole

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class LLMClient(abc.ABC):
    """Abstract base class for chat collaborators."""

    @abc.abstractmethod
    async def chat(
        self,
        system_prompt: str,
        message: str,
        history: Sequence[ConversationTurn],
        **params: Any,
    ) -> str:
        """Return the character's reply, or raise ChatError."""


class EchoLLMClient(LLMClient):
    """Offline client used when no real LLM is configured."""

    async def chat(
        self,
        system_prompt: str,
        message: str,
        history: Sequence[ConversationTurn],
        **params: Any,
    ) -> str:
        return f"[Echo] You said: {message[:40]}"


def build_messages(
    system_prompt: str,
    message: str,
    history: Sequence[ConversationTurn],
) -> List[Dict[str, str]]:
    """转换为 OpenAI chat 格式：system + 历史 + 本次提问"""
    messages = [{"role": "system", "content": system_prompt}]
    for turn in history:
        role = "user" if turn.role == TurnRole.PLAYER else "assistant"
        messages.append({"role": role, "content": turn.text})
    messages.append({"role": "user", "content": message})
    return messages


class OpenRouterClient(LLMClient):
    """OpenAI 兼容接口的客户端（OpenRouter、DeepSeek 等）"""

    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: str = "https://openrouter.ai/api/v1",
        temperature: float = 0.7,
        max_tokens: int = 512,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
        )
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info("OpenRouter client ready: model=%s base_url=%s", model_name, base_url)

    async def chat(
        self,
        system_prompt: str,
        message: str,
        history: Sequence[ConversationTurn],
        **params: Any,
    ) -> str:
        logger.debug("Calling chat API: model=%s history=%d", self.model_name, len(history))
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=build_messages(system_prompt, message, history),
                temperature=params.get("temperature", self.temperature),
                max_tokens=params.get("max_tokens", self.max_tokens),
            )
        except OpenAIError as e:
            logger.warning("Chat API call failed: %s", e)
            raise ChatError(f"Chat API call failed: {e}") from e

        if not response.choices:
            raise ChatError("Chat API returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise ChatError("Chat API returned an empty reply")
        logger.debug("Chat API reply length=%d", len(content))
        return content


def get_llm_client(settings: Settings) -> LLMClient:
    """根据配置创建 LLM 客户端；未配置密钥时退回 Echo。"""
    provider = settings.llm_provider.lower()

    if provider == "echo":
        return EchoLLMClient()

    if provider not in ("openrouter", "openai", "deepseek"):
        logger.warning("Unknown LLM_PROVIDER %r, defaulting to echo", provider)
        return EchoLLMClient()

    if not settings.api_key:
        logger.warning("LLM_PROVIDER is %s but API_KEY is not set, using echo client", provider)
        return EchoLLMClient()

    if not settings.model:
        logger.warning("MODEL is not set, using echo client (e.g. MODEL=deepseek/deepseek-chat)")
        return EchoLLMClient()

    return OpenRouterClient(
        api_key=settings.api_key,
        model_name=settings.model,
        base_url=settings.base_url,
    )
