"""Shared fixtures for Credit Calculator tests."""

import copy
import os

import pytest

# src.web.app reads the secret at import time.
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret-key")

from src.core.models import SessionResult
from src.core.report import parse_session_result

SAMPLE_AGENT_RESPONSE = {
    "status": "success",
    "unifiedReport": {
        "architectureOverview": {
            "agentCount": 3,
            "agentTypes": ["Manager Agent", "Knowledge Agent", "Escalation Agent"],
            "orchestrationPattern": "Manager-Worker",
            "kbRequired": True,
            "kbEstimatedSizeMB": 250,
            "toolsNeeded": ["Email Sender", "Ticketing API"],
            "estimatedSessionsPerMonth": 1000,
            "apiCallsPerSession": 12,
            "recommendedModels": ["GPT-5", "GPT-5 Mini"],
            "complexityScore": 6.5,
        },
        "costBreakdown": {
            "creationCosts": {"agents": 30, "sessions": 10, "kb": 25, "rai": 5, "tools": 8},
            "runtimeCostsPerQuery": {"kbRetrieval": 0.002, "apiLight": 0.001, "rai": 0.0005, "memory": 0.0003},
            "modelCostsPerQuery": {"inputCost": 0.004, "outputCost": 0.012, "model": "GPT-5"},
            "monthlyTotalCost": 1234.5,
            "annualTotalCost": 14814,
            "costPerSession": 1.2345,
            "costPerQuery": 0.2469,
        },
        "projections": {
            "estimatedMonthlyQueries": 5000,
            "estimatedAnnualQueries": 60000,
            "monthlyTotalCost": 1234.5,
            "annualTotalCost": 14814,
        },
        "recommendations": [
            "Cache frequent knowledge base lookups",
            "Route simple intents to GPT-5 Nano",
        ],
    },
    "metadata": {
        "managerAgent": "credit-calculator-manager",
        "timestamp": "2026-01-07T10:15:30.250Z",
    },
}


@pytest.fixture
def agent_response():
    """A fresh copy of a complete agent ``response`` branch."""
    return copy.deepcopy(SAMPLE_AGENT_RESPONSE)


@pytest.fixture
def success_reply(agent_response):
    """A relay reply reporting success."""
    return {"success": True, "response": agent_response}


@pytest.fixture
def session_result(agent_response) -> SessionResult:
    """A parsed SessionResult built from the sample response."""
    return parse_session_result(agent_response)
