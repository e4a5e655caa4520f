"""대시보드 실행 설정 (환경변수 / .env / Streamlit secrets)"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

PROVIDERS = ("anthropic", "gemini")

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "gemini": "gemini-2.5-flash",
}

API_KEY_VARS = {
    "anthropic": ("ANTHROPIC_API_KEY", "API_KEY"),
    "gemini": ("GEMINI_API_KEY", "API_KEY"),
}

# 앙골라 Google Trends 검색어 샘플 (정적 데이터)
DEFAULT_KEYWORDS = (
    "iphone 15 pro max luanda",
    "preço de fuba de milho",
    "venda de carros usados angola",
    "roupas de fardo atacado",
    "perucas humanas baratas",
    "melhores paineis solares",
    "venda de geradores a diesel",
    "cremes clareadores para pele",
    "cursos de marketing digital angola",
    "smart tv samsung 55 polegadas",
    "sapatilhas nike originais",
    "materiais de construção preços",
)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    provider: str = "anthropic"
    api_key: str = ""
    model: str = DEFAULT_MODELS["anthropic"]
    max_tokens: int = 8192
    timeout: Optional[float] = None
    region: str = "Angola"
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        환경변수에서 설정을 읽습니다.

        Args:
            environ: 테스트용 매핑 (기본값: os.environ)

        Raises:
            ConfigError: provider, 숫자 값, 로그 레벨이 잘못된 경우
        """
        env = os.environ if environ is None else environ

        provider = env.get("KIZUA_PROVIDER", "anthropic").strip().lower()
        if provider not in PROVIDERS:
            raise ConfigError(
                f"KIZUA_PROVIDER는 {', '.join(PROVIDERS)} 중 하나여야 합니다: {provider!r}"
            )

        api_key = ""
        for var in API_KEY_VARS[provider]:
            if env.get(var):
                api_key = env[var]
                break

        max_tokens = _parse_number(env, "KIZUA_MAX_TOKENS", int, 8192)
        timeout = _parse_number(env, "KIZUA_TIMEOUT", float, None)

        raw_keywords = env.get("KIZUA_KEYWORDS", "")
        keywords = tuple(k.strip() for k in raw_keywords.split(",") if k.strip())

        log_level = env.get("KIZUA_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"KIZUA_LOG_LEVEL: 알 수 없는 로그 레벨 {log_level!r}")

        return cls(
            provider=provider,
            api_key=api_key,
            model=env.get("KIZUA_MODEL") or DEFAULT_MODELS[provider],
            max_tokens=max_tokens,
            timeout=timeout,
            region=env.get("KIZUA_REGION") or "Angola",
            keywords=keywords or DEFAULT_KEYWORDS,
            log_level=log_level,
        )


def _parse_number(env, name, kind, default):
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name}: 숫자가 아닙니다: {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name}: 0보다 커야 합니다: {raw!r}")
    return value


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
