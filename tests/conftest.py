import copy

import pytest
from langchain_core.messages import AIMessage

import ai_processor
from constants import CONTRACT_SECTIONS, RISK_CATEGORIES

VALID_ANALYSIS = {
    "overallRiskLevel": "Low Risk",
    "keyFindings": [
        {
            "title": "Capped liability",
            "description": "Each party's liability is limited to $50,000. Indirect damages are excluded.",
            "severity": "low",
            "category": "legal",
        }
    ],
    "recommendations": [
        {
            "title": "Clarify late fees",
            "description": "State whether the 1.5% penalty compounds.",
            "priority": "medium",
            "category": "financial",
        }
    ],
    "missingClauses": [
        {
            "clause": "Force Majeure",
            "importance": "important",
            "description": "No relief for events beyond either party's control.",
            "potentialRisk": "A party may be in breach for unavoidable delays.",
        }
    ],
    "sections": {
        key: {
            "title": title,
            "content": f"{title} are addressed in the agreement.",
            "keyFindings": [
                {"finding": "Standard wording", "riskLevel": "low", "recommendation": "None required"}
            ],
        }
        for key, title in CONTRACT_SECTIONS.items()
    },
    "riskSummary": {
        category: {
            "level": "low",
            "description": f"{category.title()} exposure is limited.",
            "keyConcerns": [],
            "recommendations": [],
        }
        for category in RISK_CATEGORIES
    },
    "contractMetadata": {
        "estimatedValue": "$60,000 per year",
        "contractDuration": "12 months",
        "partiesInvolved": ["Company A", "Company B"],
        "industry": "Professional services",
        "contractType": "Service Agreement",
    },
}


class FakeLLM:
    """Stands in for ChatOpenAI, answering with a fixed reply or raising."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def invoke(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, AIMessage):
            return self.reply
        return AIMessage(content=self.reply)


@pytest.fixture
def valid_analysis():
    return copy.deepcopy(VALID_ANALYSIS)


@pytest.fixture
def fake_llm(monkeypatch):
    """Install a FakeLLM for both analysis and chat calls and return it."""
    llm = FakeLLM(reply="")
    monkeypatch.setattr(ai_processor, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(ai_processor, "get_analysis_llm", lambda: llm)
    monkeypatch.setattr(ai_processor, "get_chat_llm", lambda: llm)
    return llm
