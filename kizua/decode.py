"""AI 응답 JSON → MarketAnalysisResponse 변환 및 검증"""
from enum import Enum
from typing import Any

from .errors import DecodeError
from .models import (
    DemandLevel,
    HistoryPoint,
    MarketAnalysisResponse,
    ProductTrend,
    TrendDirection,
)


def decode_analysis(data: Any) -> MarketAnalysisResponse:
    """
    파싱된 JSON을 검증하여 분석 결과로 변환합니다.

    필수 필드 누락이나 타입 불일치가 있으면 해당 필드 경로
    (예: ``trends[0].demandLevel``)를 담은 DecodeError를 발생시킵니다.
    알 수 없는 필드는 무시합니다.
    """
    obj = _object(data, "$")
    trends = tuple(
        _product(item, f"trends[{i}]")
        for i, item in enumerate(_array(obj, "trends", "$"))
    )
    return MarketAnalysisResponse(
        trends=trends,
        market_overview=_string(obj, "marketOverview", "$"),
        top_opportunities=_string_list(obj, "topOpportunities", "$"),
    )


def _product(item: Any, path: str) -> ProductTrend:
    obj = _object(item, path)
    keywords = ()
    if obj.get("keywords") is not None:
        keywords = _string_list(obj, "keywords", path)
    return ProductTrend(
        id=_string(obj, "id", path),
        name=_string(obj, "name", path),
        category=_string(obj, "category", path),
        demand_level=_enum(obj, "demandLevel", path, DemandLevel),
        trend=_enum(obj, "trend", path, TrendDirection),
        growth_percentage=_number(obj, "growthPercentage", path),
        opportunity_score=_number(obj, "opportunityScore", path),
        reasoning=_string(obj, "reasoning", path),
        history=tuple(
            _history_point(point, f"{path}.history[{i}]")
            for i, point in enumerate(_array(obj, "history", path))
        ),
        keywords=keywords,
    )


def _history_point(item: Any, path: str) -> HistoryPoint:
    obj = _object(item, path)
    return HistoryPoint(date=_string(obj, "date", path), value=_number(obj, "value", path))


def _field_path(path: str, key: str) -> str:
    return key if path == "$" else f"{path}.{key}"


def _object(value: Any, path: str) -> dict:
    if not isinstance(value, dict):
        raise DecodeError(path, f"expected object, got {type(value).__name__}")
    return value


def _require(obj: dict, key: str, path: str) -> Any:
    if key not in obj or obj[key] is None:
        raise DecodeError(_field_path(path, key), "missing required field")
    return obj[key]


def _string(obj: dict, key: str, path: str) -> str:
    value = _require(obj, key, path)
    if not isinstance(value, str):
        raise DecodeError(_field_path(path, key), f"expected string, got {type(value).__name__}")
    return value


def _number(obj: dict, key: str, path: str) -> float:
    value = _require(obj, key, path)
    # bool은 int의 하위 타입이라 따로 제외
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(_field_path(path, key), f"expected number, got {type(value).__name__}")
    return value


def _array(obj: dict, key: str, path: str) -> list:
    value = _require(obj, key, path)
    if not isinstance(value, list):
        raise DecodeError(_field_path(path, key), f"expected array, got {type(value).__name__}")
    return value


def _string_list(obj: dict, key: str, path: str) -> tuple[str, ...]:
    items = _array(obj, key, path)
    for i, value in enumerate(items):
        if not isinstance(value, str):
            raise DecodeError(
                f"{_field_path(path, key)}[{i}]", f"expected string, got {type(value).__name__}"
            )
    return tuple(items)


def _enum(obj: dict, key: str, path: str, enum_cls: type[Enum]):
    raw = _string(obj, key, path)
    label = raw.strip()
    for member in enum_cls:
        if label.lower() == member.value.lower() or label.upper() == member.name:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise DecodeError(_field_path(path, key), f"expected one of {allowed}, got {raw!r}")
