from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .models import DemandLevel, HistoryPoint, MarketAnalysisResponse, TrendDirection

DEFAULT_LINE_COLOR = "#2563eb"

TREND_COLORS = {
    TrendDirection.UP: "#059669",
    TrendDirection.STABLE: "#d97706",
    TrendDirection.DOWN: "#e11d48",
}

DEMAND_COLORS = {
    DemandLevel.HIGH: "#4f46e5",
    DemandLevel.MEDIUM: "#a5b4fc",
    DemandLevel.LOW: "#cbd5e1",
}


def trend_chart(series: Sequence[HistoryPoint], color: Optional[str] = None) -> go.Figure:
    """
    제품별 30일 추이 라인 차트.

    x는 입력 순번이고 날짜는 hover(customdata)에서만 보입니다. 날짜가 중복돼도
    점마다 자리를 하나씩 차지하며 입력 순서를 그대로 유지합니다.
    빈 시계열이면 데이터 없는 빈 차트를 반환합니다.
    """
    fig = go.Figure(
        go.Scatter(
            x=list(range(len(series))),
            y=[p.value for p in series],
            mode="lines",
            line=dict(color=color or DEFAULT_LINE_COLOR, width=2, shape="spline"),
            customdata=[p.date for p in series],
            hovertemplate="%{customdata}<br>%{y}<extra></extra>",
        )
    )
    fig.update_layout(
        height=128,
        margin=dict(l=0, r=0, t=0, b=0),
        showlegend=False,
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(visible=False, showgrid=False),
        yaxis=dict(
            showticklabels=False,
            title=None,
            showgrid=True,
            gridcolor="#e2e8f0",
            griddash="dash",
            zeroline=False,
        ),
    )
    return fig


def trends_frame(response: MarketAnalysisResponse) -> pd.DataFrame:
    """제품 목록 표 (원본 데이터 테이블 / CSV 내보내기용)"""
    rows = []
    for i, t in enumerate(response.trends, 1):
        rows.append(
            {
                "#": i,
                "Produto": t.name,
                "Categoria": t.category,
                "Procura": t.demand_level.value,
                "Tendência": t.trend.value,
                "Crescimento (%)": t.growth_percentage,
                "Score": t.opportunity_score,
                "Keywords": ", ".join(t.keywords),
                "Análise": t.reasoning,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "#",
            "Produto",
            "Categoria",
            "Procura",
            "Tendência",
            "Crescimento (%)",
            "Score",
            "Keywords",
            "Análise",
        ],
    )


def opportunity_chart(response: MarketAnalysisResponse) -> go.Figure:
    """제품별 Opportunity Score 가로 막대 (응답 순서 유지, 추세별 색상)"""
    df = trends_frame(response)
    fig = px.bar(
        df,
        x="Score",
        y="Produto",
        color="Tendência",
        orientation="h",
        color_discrete_map={t.value: c for t, c in TREND_COLORS.items()},
        category_orders={"Produto": df["Produto"].tolist()},
        hover_data=["Categoria", "Crescimento (%)"],
    )
    fig.update_layout(
        height=max(240, len(df) * 36 + 80),
        xaxis=dict(range=[0, 100], title="Score de Oportunidade"),
        yaxis=dict(title=None, autorange="reversed"),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, title=None),
        margin=dict(l=10, r=10, t=30, b=10),
    )
    return fig


def demand_chart(response: MarketAnalysisResponse) -> go.Figure:
    """수요 수준별 제품 수 파이 차트"""
    counts = {level.value: 0 for level in DemandLevel}
    for t in response.trends:
        counts[t.demand_level.value] += 1
    df = pd.DataFrame(
        [{"Procura": k, "Produtos": v} for k, v in counts.items() if v > 0],
        columns=["Procura", "Produtos"],
    )
    fig = px.pie(
        df,
        names="Procura",
        values="Produtos",
        color="Procura",
        color_discrete_map={d.value: c for d, c in DEMAND_COLORS.items()},
        hole=0.45,
    )
    fig.update_layout(
        height=280,
        margin=dict(l=10, r=10, t=30, b=10),
        legend=dict(orientation="h", yanchor="bottom", y=-0.1, xanchor="center", x=0.5),
    )
    return fig
