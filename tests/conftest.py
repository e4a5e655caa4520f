"""Shared fixtures for the Kizua Trends test suite"""

import copy
import json

import pytest

SCENARIO_KEYWORDS = ["iphone 15 pro max luanda", "preço de fuba de milho"]

SCENARIO_PAYLOAD = {
    "trends": [
        {
            "id": "1",
            "name": "Smartphones Importados",
            "category": "Eletrônicos",
            "demandLevel": "Alta",
            "trend": "Subindo",
            "growthPercentage": 32,
            "keywords": ["iphone"],
            "opportunityScore": 88,
            "reasoning": "Alta procura por importação direta",
            "history": [
                {"date": "2024-01-01", "value": 10},
                {"date": "2024-01-02", "value": 14},
            ],
        }
    ],
    "marketOverview": "Mercado em expansão",
    "topOpportunities": ["Eletrônicos"],
}


class FakeOracle:
    """Records every call and replies with canned text (or raises)"""

    name = "fake"

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, prompt, system_instruction, response_schema):
        self.calls.append(
            {
                "prompt": prompt,
                "system_instruction": system_instruction,
                "response_schema": response_schema,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def payload():
    """Deep copy of the scenario payload, safe to mutate"""
    return copy.deepcopy(SCENARIO_PAYLOAD)


@pytest.fixture
def payload_text(payload):
    return json.dumps(payload, ensure_ascii=False)


@pytest.fixture
def multi_payload(payload):
    """Payload with three products and five opportunities"""
    first = payload["trends"][0]
    solar = dict(
        first,
        id="2",
        name="Painéis Solares",
        category="Energia",
        demandLevel="Média",
        trend="Estável",
        growthPercentage=-4.5,
        opportunityScore=61,
        keywords=["paineis solares", "geradores", "paineis solares"],
    )
    wigs = dict(
        first,
        id="3",
        name="Perucas",
        category="Beleza",
        demandLevel="Baixa",
        trend="Caindo",
        growthPercentage=0,
        opportunityScore=120,
    )
    payload["trends"] = [first, solar, wigs]
    payload["topOpportunities"] = ["Eletrônicos", "Energia", "Beleza", "Moda", "Construção"]
    return payload
