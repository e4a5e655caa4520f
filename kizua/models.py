from dataclasses import dataclass, field
from enum import Enum


class DemandLevel(str, Enum):
    LOW = "Baixa"
    MEDIUM = "Média"
    HIGH = "Alta"


class TrendDirection(str, Enum):
    UP = "Subindo"
    STABLE = "Estável"
    DOWN = "Caindo"


@dataclass(frozen=True)
class HistoryPoint:
    date: str
    value: float

    def to_dict(self) -> dict:
        return {"date": self.date, "value": self.value}


@dataclass(frozen=True)
class ProductTrend:
    id: str
    name: str
    category: str
    demand_level: DemandLevel
    trend: TrendDirection
    growth_percentage: float
    opportunity_score: float
    reasoning: str
    history: tuple[HistoryPoint, ...] = ()
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Wire shape (camelCase), as the oracle returns it."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "demandLevel": self.demand_level.value,
            "trend": self.trend.value,
            "growthPercentage": self.growth_percentage,
            "keywords": list(self.keywords),
            "opportunityScore": self.opportunity_score,
            "reasoning": self.reasoning,
            "history": [p.to_dict() for p in self.history],
        }


@dataclass(frozen=True)
class MarketAnalysisResponse:
    trends: tuple[ProductTrend, ...]
    market_overview: str
    top_opportunities: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "trends": [t.to_dict() for t in self.trends],
            "marketOverview": self.market_overview,
            "topOpportunities": list(self.top_opportunities),
        }
