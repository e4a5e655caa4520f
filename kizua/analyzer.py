import json
import logging
from typing import Sequence

from .decode import decode_analysis
from .errors import DecodeError, OracleError, ResponseFormatError
from .models import DemandLevel, MarketAnalysisResponse, TrendDirection
from .oracle import Oracle

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
Você é um Analista de Mercado Especialista na economia de {region}.
Sua tarefa é analisar palavras-chave brutas do Google Trends (Região {region}) e transformá-las em insights de negócios.
1. Filtre apenas produtos físicos e serviços comercializáveis (ignore celebridades, notícias políticas ou buscas sem valor comercial).
2. Agrupe termos semelhantes (ex: "tenis nike", "sapatos de corrida", "calçado desportivo" -> "Calçados Desportivos").
3. Determine o nível de procura (Baixa, Média, Alta) com base no volume relativo.
4. Identifique a tendência (Subindo, Estável, Caindo).
5. Estime o crescimento percentual e atribua um "Opportunity Score" de 0 a 100.
6. Forneça uma breve explicação (reasoning) do porquê esse produto é uma oportunidade em {region} agora.
7. Gere um histórico estimado de 30 dias (um ponto por dia, datas em formato AAAA-MM-DD) para cada produto.
"""

# Gemini Schema 형식 (type 이름은 대문자). Claude에는 같은 내용을 JSON 텍스트로 전달합니다.
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "trends": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "name": {"type": "STRING"},
                    "category": {"type": "STRING"},
                    "demandLevel": {"type": "STRING", "enum": [d.value for d in DemandLevel]},
                    "trend": {"type": "STRING", "enum": [t.value for t in TrendDirection]},
                    "growthPercentage": {"type": "NUMBER"},
                    "keywords": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "opportunityScore": {"type": "NUMBER"},
                    "reasoning": {"type": "STRING"},
                    "history": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "date": {"type": "STRING"},
                                "value": {"type": "NUMBER"},
                            },
                        },
                    },
                },
                "required": [
                    "id",
                    "name",
                    "category",
                    "demandLevel",
                    "trend",
                    "growthPercentage",
                    "opportunityScore",
                    "reasoning",
                    "history",
                ],
            },
        },
        "marketOverview": {"type": "STRING"},
        "topOpportunities": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["trends", "marketOverview", "topOpportunities"],
}


def _build_analysis_prompt(keywords: Sequence[str], region: str) -> str:
    return (
        f"Analise as seguintes palavras-chave coletadas do Google Trends {region}: "
        f"{', '.join(keywords)}"
    )


def _strip_code_fence(text: str) -> str:
    content = text.strip()
    if content.startswith("```"):
        content = content.split("```")[1]
        if content.startswith("json"):
            content = content[4:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _parse_analysis_response(response_text: str) -> MarketAnalysisResponse:
    content = _strip_code_fence(response_text)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("AI 응답 JSON 파싱 실패: %s", e)
        raise ResponseFormatError(str(e)) from e

    try:
        return decode_analysis(data)
    except DecodeError as e:
        logger.error("AI 응답 스키마 불일치: %s (%s)", e.field, e.reason)
        raise


class MarketAnalyzer:
    """키워드 목록을 AI 서비스에 한 번 보내고 구조화된 분석 결과를 돌려줍니다."""

    def __init__(self, oracle: Oracle, region: str = "Angola"):
        self.oracle = oracle
        self.region = region

    @property
    def system_instruction(self) -> str:
        return SYSTEM_INSTRUCTION.format(region=self.region)

    async def analyze(self, keywords: Sequence[str]) -> MarketAnalysisResponse:
        """
        시장 분석을 수행합니다. 재시도/캐시 없이 호출은 정확히 1회입니다.

        Raises:
            OracleError: AI 서비스 호출 실패
            ResponseFormatError: 응답이 JSON이 아님
            DecodeError: 필수 필드 누락 또는 타입 불일치
        """
        prompt = _build_analysis_prompt(keywords, self.region)
        logger.info(
            "시장 분석 요청: %d개 키워드 (%s)",
            len(keywords),
            getattr(self.oracle, "name", type(self.oracle).__name__),
        )

        try:
            response_text = await self.oracle.generate(
                prompt, self.system_instruction, RESPONSE_SCHEMA
            )
        except Exception as e:
            logger.exception("AI 서비스 호출 실패")
            raise OracleError(str(e)) from e

        result = _parse_analysis_response(response_text)
        logger.info("시장 분석 완료: %d개 제품", len(result.trends))
        return result
