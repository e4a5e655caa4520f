ANALYSIS_FAILED = "Falha na análise de dados."


class AnalysisError(Exception):
    """분석 실패. 사용자에게는 항상 같은 메시지로 보입니다."""

    def __init__(self, detail: str = ""):
        super().__init__(ANALYSIS_FAILED)
        self.detail = detail


class OracleError(AnalysisError):
    """AI 서비스 호출 자체가 실패 (네트워크, 인증, SDK 오류)"""


class ResponseFormatError(AnalysisError):
    """응답 텍스트가 JSON이 아님"""


class DecodeError(AnalysisError):
    """JSON은 맞지만 필드가 없거나 타입이 다름"""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason
