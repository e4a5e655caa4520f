"""대시보드 상태 (loading / data / error) 와 상태 → 화면 모델 변환"""
import logging
import re
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from .analyzer import MarketAnalyzer
from .charts import TREND_COLORS
from .models import DemandLevel, HistoryPoint, MarketAnalysisResponse, ProductTrend, TrendDirection

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Não foi possível carregar os dados. Verifique sua conexão ou chave de API."
OVERVIEW_PLACEHOLDER = "Aguardando análise da IA sobre o mercado de {region}..."
SKELETON_COUNT = 4
TOP_OPPORTUNITIES = 3

# (배경색, 글자색)
DEMAND_BADGE_STYLES = {
    DemandLevel.HIGH: ("#4f46e5", "#ffffff"),
    DemandLevel.MEDIUM: ("#e0e7ff", "#4338ca"),
    DemandLevel.LOW: ("#f1f5f9", "#475569"),
}

TREND_PILL_STYLES = {
    TrendDirection.UP: ("#ecfdf5", "#059669"),
    TrendDirection.DOWN: ("#fff1f2", "#e11d48"),
    TrendDirection.STABLE: ("#fffbeb", "#d97706"),
}


@dataclass(frozen=True)
class ViewState:
    loading: bool = False
    data: Optional[MarketAnalysisResponse] = None
    error: Optional[str] = None


class DashboardController:
    """
    새로고침 요청마다 단조 증가하는 토큰을 발급하고, 가장 최근 토큰의
    결과만 상태에 반영합니다. 이전 요청의 늦은 응답은 조용히 버립니다.
    """

    def __init__(self, analyzer: MarketAnalyzer, keywords: Sequence[str]):
        self.analyzer = analyzer
        self.keywords = list(keywords)
        self.state = ViewState()
        self._latest_token = 0
        self._mounted = False

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def begin_refresh(self) -> int:
        self._latest_token += 1
        self.state = replace(self.state, loading=True, error=None)
        return self._latest_token

    async def complete(self, token: int) -> None:
        try:
            result = await self.analyzer.analyze(self.keywords)
        except Exception:
            if token != self._latest_token:
                logger.debug("오래된 요청 #%d 실패 무시", token)
                return
            logger.exception("시장 분석 실패 (요청 #%d)", token)
            self.state = replace(self.state, loading=False, error=LOAD_ERROR_MESSAGE)
            return

        if token != self._latest_token:
            logger.debug("오래된 요청 #%d 결과 무시 (최신 #%d)", token, self._latest_token)
            return
        self.state = ViewState(loading=False, data=result, error=None)

    async def refresh(self) -> None:
        await self.complete(self.begin_refresh())

    def begin_mount(self) -> Optional[int]:
        """첫 화면 진입 시에만 토큰을 발급합니다. 이미 마운트됐으면 None."""
        if self._mounted:
            return None
        self._mounted = True
        return self.begin_refresh()

    async def mount(self) -> None:
        token = self.begin_mount()
        if token is not None:
            await self.complete(token)


# ─── 화면 모델 ───


@dataclass(frozen=True)
class CardView:
    key: str
    name: str
    category: str
    demand_label: str
    demand_style: tuple[str, str]
    trend_label: str
    trend_style: tuple[str, str]
    trend_icon: str
    growth_text: str
    keywords: tuple[str, ...]
    reasoning: str
    history: tuple[HistoryPoint, ...]
    chart_color: str
    score: float
    score_width: float


@dataclass(frozen=True)
class OpportunityView:
    rank: int
    text: str


@dataclass(frozen=True)
class DashboardView:
    loading: bool
    overview: str
    error: Optional[str]
    opportunities: tuple[OpportunityView, ...]
    cards: tuple[CardView, ...]
    skeleton_count: int
    refresh_label: str
    has_data: bool
    response: Optional[MarketAnalysisResponse] = None


# Streamlit markdown 문법 문자 ($ 수식, :color[] 지시자 포함)
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|>~<$:])")


def escape_markdown(text: str) -> str:
    """AI가 만든 텍스트를 st.markdown에 그대로 보이도록 이스케이프합니다."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def _format_growth(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{_format_number(value)}%"


def project_card(product: ProductTrend) -> CardView:
    up = product.trend == TrendDirection.UP
    return CardView(
        key=product.id,
        name=product.name,
        category=product.category,
        demand_label=f"Procura {product.demand_level.value}",
        demand_style=DEMAND_BADGE_STYLES[product.demand_level],
        trend_label=product.trend.value,
        trend_style=TREND_PILL_STYLES[product.trend],
        trend_icon="↗" if up else "↘",
        growth_text=_format_growth(product.growth_percentage),
        keywords=product.keywords,
        reasoning=product.reasoning,
        history=product.history,
        chart_color=TREND_COLORS[TrendDirection.UP] if up else TREND_COLORS[TrendDirection.DOWN],
        score=product.opportunity_score,
        score_width=min(max(product.opportunity_score, 0), 100),
    )


def project(state: ViewState, region: str = "Angola") -> DashboardView:
    """상태 → 화면 모델. 순수 함수이며 상태가 바뀔 때마다 다시 호출합니다."""
    data = state.data
    overview = (data.market_overview if data else "") or OVERVIEW_PLACEHOLDER.format(region=region)
    opportunities = ()
    if data is not None:
        opportunities = tuple(
            OpportunityView(rank=i, text=text)
            for i, text in enumerate(data.top_opportunities[:TOP_OPPORTUNITIES], 1)
        )

    cards = ()
    if not state.loading and data is not None:
        cards = tuple(project_card(p) for p in data.trends)

    return DashboardView(
        loading=state.loading,
        overview=overview,
        error=state.error,
        opportunities=opportunities,
        cards=cards,
        skeleton_count=SKELETON_COUNT if state.loading else 0,
        refresh_label="Analisando..." if state.loading else "Atualizar Dados",
        has_data=data is not None,
        response=data,
    )
