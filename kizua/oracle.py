"""외부 AI 추론 서비스 어댑터 (Claude / Gemini)"""
import json
import logging
from typing import Protocol

from .config import Settings

logger = logging.getLogger(__name__)

JSON_ONLY_INSTRUCTION = (
    "Retorne apenas um objeto JSON válido que siga exatamente o esquema abaixo. "
    "Não inclua nenhum texto fora do JSON."
)


class Oracle(Protocol):
    async def generate(
        self, prompt: str, system_instruction: str, response_schema: dict
    ) -> str: ...


class AnthropicOracle:
    """Claude Messages API. 스키마는 시스템 프롬프트에 JSON으로 첨부합니다."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str, max_tokens: int = 8192, timeout=None):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    def _get_client(self):
        from anthropic import AsyncAnthropic

        kwargs = {"api_key": self.api_key}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return AsyncAnthropic(**kwargs)

    async def generate(self, prompt: str, system_instruction: str, response_schema: dict) -> str:
        system = "\n\n".join(
            [
                system_instruction.strip(),
                JSON_ONLY_INSTRUCTION,
                json.dumps(response_schema, ensure_ascii=False, indent=1),
            ]
        )
        async with self._get_client() as client:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        logger.debug("anthropic stop_reason=%s", response.stop_reason)
        return "".join(block.text for block in response.content if block.type == "text")


class GeminiOracle:
    """Gemini generate_content (response_schema 네이티브 지원)"""

    name = "gemini"

    def __init__(self, api_key: str, model: str, timeout=None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def _get_client(self):
        from google import genai

        http_options = None
        if self.timeout is not None:
            # google-genai는 밀리초 단위
            http_options = {"timeout": int(self.timeout * 1000)}
        return genai.Client(api_key=self.api_key, http_options=http_options)

    async def generate(self, prompt: str, system_instruction: str, response_schema: dict) -> str:
        async with self._get_client().aio as client:
            response = await client.models.generate_content(
                model=self.model,
                contents=prompt,
                config={
                    "system_instruction": system_instruction,
                    "response_mime_type": "application/json",
                    "response_schema": response_schema,
                },
            )
        return response.text or ""


def create_oracle(settings: Settings) -> Oracle:
    if settings.provider == "gemini":
        return GeminiOracle(settings.api_key, settings.model, timeout=settings.timeout)
    return AnthropicOracle(
        settings.api_key,
        settings.model,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout,
    )
