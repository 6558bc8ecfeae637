"""Outbound request construction for the credit calculator agent."""

import json
from dataclasses import dataclass
from typing import Any, Dict

from src.shared.errors import EmptyInputError
from .models import UsageParameters

EMPTY_INPUT_MESSAGE = "Please enter a problem statement"


@dataclass(frozen=True)
class AgentRequest:
    """Relay envelope: routing id plus the parameters as a JSON string."""

    agent_id: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the relay POST body."""
        return {"agent_id": self.agent_id, "message": self.message}


def build_agent_request(params: UsageParameters, agent_id: str) -> AgentRequest:
    """
    Build the relay request for a set of usage parameters.

    Args:
        params: Current form values
        agent_id: Routing identifier of the manager agent

    Returns:
        AgentRequest ready to be posted to the relay

    Raises:
        EmptyInputError: If the problem statement is blank after trimming
    """
    if not params.problemStatement.strip():
        raise EmptyInputError(EMPTY_INPUT_MESSAGE)

    message = json.dumps(
        {
            "problemStatement": params.problemStatement,
            "monthlySessions": params.monthlySessions,
            "queriesPerSession": params.queriesPerSession,
            "modelTier": params.modelTier,
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return AgentRequest(agent_id=agent_id, message=message)
