import asyncio
import html
import json
import os

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Streamlit Cloud secrets → 환경변수로 복사 (배포 환경 지원)
try:
    for key in st.secrets:
        if isinstance(st.secrets[key], str):
            os.environ.setdefault(key, st.secrets[key])
except FileNotFoundError:
    pass

from kizua.analyzer import MarketAnalyzer
from kizua.charts import demand_chart, opportunity_chart, trend_chart, trends_frame
from kizua.config import ConfigError, Settings, configure_logging
from kizua.oracle import create_oracle
from kizua.view import CardView, DashboardController, DashboardView, escape_markdown, project

st.set_page_config(
    page_title="Kizua Trends",
    page_icon="📈",
    layout="wide",
)

try:
    settings = Settings.from_env()
except ConfigError as e:
    st.error(f"Configuração inválida: {e}")
    st.stop()

configure_logging(settings.log_level)

st.markdown(
    """
    <style>
    .kz-badge {display:inline-block;padding:2px 10px;border-radius:6px;font-size:11px;
               font-weight:700;text-transform:uppercase;letter-spacing:.05em;margin-right:6px;}
    .kz-growth {font-size:26px;font-weight:900;color:#4f46e5;text-align:right;line-height:1;}
    .kz-muted {font-size:11px;font-weight:700;color:#94a3b8;text-transform:uppercase;letter-spacing:.08em;}
    .kz-chip {display:inline-block;font-size:12px;background:#f1f5f9;color:#475569;
              padding:2px 8px;border-radius:6px;margin:0 4px 4px 0;}
    .kz-bar {width:100%;height:8px;background:#f1f5f9;border-radius:9999px;overflow:hidden;}
    .kz-bar > div {height:100%;background:#4f46e5;border-radius:9999px;}
    .kz-skeleton {height:256px;border-radius:16px;background:#e2e8f0;margin-bottom:16px;
                  animation:kz-pulse 1.5s ease-in-out infinite;}
    @keyframes kz-pulse {0%,100% {opacity:1;} 50% {opacity:.45;}}
    </style>
    """,
    unsafe_allow_html=True,
)


def _get_controller() -> DashboardController:
    """세션당 컨트롤러 1개 (AI 클라이언트는 여기서만 생성)"""
    if "controller" not in st.session_state:
        analyzer = MarketAnalyzer(create_oracle(settings), region=settings.region)
        st.session_state.controller = DashboardController(analyzer, settings.keywords)
    return st.session_state.controller


def _request_refresh():
    st.session_state.refresh_requested = True


def _badge(text: str, style: tuple[str, str]) -> str:
    bg, fg = style
    return f'<span class="kz-badge" style="background:{bg};color:{fg};">{html.escape(text)}</span>'


def render_card(card: CardView, idx: int):
    with st.container(border=True):
        head, growth = st.columns([3, 1])
        with head:
            st.markdown(
                _badge(card.demand_label, card.demand_style)
                + _badge(f"{card.trend_icon} {card.trend_label}", card.trend_style),
                unsafe_allow_html=True,
            )
            st.markdown(f"### {escape_markdown(card.name)}")
            st.caption(escape_markdown(card.category))
        with growth:
            st.markdown(
                f'<div class="kz-growth">{html.escape(card.growth_text)}</div>'
                f'<div class="kz-muted" style="text-align:right;">Crescimento Est.</div>',
                unsafe_allow_html=True,
            )

        info, chart = st.columns(2)
        with info:
            st.markdown('<div class="kz-muted">🔍 Keywords</div>', unsafe_allow_html=True)
            chips = "".join(f'<span class="kz-chip">{html.escape(kw)}</span>' for kw in card.keywords)
            st.markdown(chips or "-", unsafe_allow_html=True)
            st.markdown('<div class="kz-muted">💼 Análise IA</div>', unsafe_allow_html=True)
            st.markdown(f"*“{escape_markdown(card.reasoning)}”*")
        with chart:
            st.markdown('<div class="kz-muted">Histórico 30 Dias</div>', unsafe_allow_html=True)
            st.plotly_chart(
                trend_chart(card.history, color=card.chart_color),
                width="stretch",
                config={"displayModeBar": False},
                key=f"trend_{idx}_{card.key}",
            )

        score_label, score_bar, score_value = st.columns([2, 3, 1])
        score_label.markdown("**Score de Oportunidade:**")
        score_bar.markdown(
            f'<div class="kz-bar" style="margin-top:10px;"><div style="width:{card.score_width}%;"></div></div>',
            unsafe_allow_html=True,
        )
        score_value.markdown(f"**{card.score:g}/100**")


def render(view: DashboardView):
    # 헤더
    brand, region, refresh = st.columns([3, 2, 1])
    with brand:
        st.markdown("## 📊 Kizua**Trends**")
    with region:
        st.markdown(f"<br>Mercado: **{html.escape(settings.region)}**", unsafe_allow_html=True)
    with refresh:
        st.markdown("<br>", unsafe_allow_html=True)
        st.button(
            view.refresh_label,
            type="primary",
            width="stretch",
            disabled=view.loading,
            on_click=_request_refresh,
        )

    # 시장 개요
    with st.container(border=True):
        overview, status = st.columns([3, 1])
        with overview:
            st.title("Monitoramento de Tendências")
            st.markdown(escape_markdown(view.overview))
        with status:
            st.caption("STATUS DO SISTEMA")
            st.markdown(f"🟢 **IA Conectada** ({settings.provider})")
            st.caption("REGIÃO PRINCIPAL")
            st.markdown(f"🌍 **{settings.region}**")

    if view.error:
        st.error(view.error, icon="⚠️")

    # 상위 기회 3개
    if view.opportunities:
        for col, opp in zip(st.columns(3), view.opportunities):
            with col, st.container(border=True):
                st.markdown(f"⚡ **Oportunidade #{opp.rank}**")
                st.markdown(escape_markdown(opp.text))

    data = view.response
    if view.has_data and not view.loading and data.trends:
        st.divider()
        c1, c2 = st.columns([3, 2])
        with c1:
            st.subheader("Score por Produto")
            st.plotly_chart(opportunity_chart(data), width="stretch")
        with c2:
            st.subheader("Distribuição da Procura")
            st.plotly_chart(demand_chart(data), width="stretch")

    st.divider()
    st.subheader("🛍️ Produtos Identificados")

    cols = st.columns(2)
    if view.loading:
        for i in range(view.skeleton_count):
            cols[i % 2].markdown('<div class="kz-skeleton"></div>', unsafe_allow_html=True)
    else:
        for i, card in enumerate(view.cards):
            with cols[i % 2]:
                render_card(card, i)

    if view.has_data and not view.loading:
        with st.expander("Dados brutos", expanded=False):
            df = trends_frame(data)
            st.dataframe(df, width="stretch", hide_index=True)
            d1, d2 = st.columns(2)
            d1.download_button(
                "CSV",
                df.to_csv(index=False).encode("utf-8-sig"),
                file_name="kizua_trends.csv",
                mime="text/csv",
                width="stretch",
            )
            d2.download_button(
                "JSON",
                json.dumps(data.to_dict(), ensure_ascii=False, indent=2),
                file_name="kizua_trends.json",
                mime="application/json",
                width="stretch",
            )

    # 푸터
    st.divider()
    f1, f2, f3 = st.columns([2, 1, 1])
    with f1:
        st.markdown("**Arquitetura Técnica do Kizua Trends**")
        st.caption(
            "Palavras-chave de pesquisa da região são enviadas a um motor de raciocínio de IA "
            "para filtragem categórica, agrupamento semântico e projeção de crescimento."
        )
        st.caption(f"Palavras-chave analisadas: {len(settings.keywords)}")
    with f2:
        st.markdown("**Fluxo IA**")
        st.caption(
            "1. Ingestão Bruta  \n2. Deduplicação Semântica  \n3. Validação de Produtos  \n"
            "4. Projeção de Crescimento  \n5. Geração de Insights Biz"
        )
    with f3:
        st.markdown("**Modelo**")
        st.caption(f"{settings.provider} / {settings.model}")


controller = _get_controller()

# 첫 진입 자동 분석 또는 새로고침 버튼
refresh_requested = st.session_state.pop("refresh_requested", False)
token = controller.begin_mount()
if token is None and refresh_requested:
    token = controller.begin_refresh()

render(project(controller.state, region=settings.region))

if token is not None:
    with st.spinner("Analisando tendências..."):
        asyncio.run(controller.complete(token))
    st.rerun()
