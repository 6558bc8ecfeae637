"""Shared data models for the credit calculator.

Field names follow the agent's wire format so that ``to_dict`` output can be
returned to the browser unchanged. Report types are frozen: a new calculation
replaces the whole tree instead of patching it.
"""

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

from src.shared.errors import ValidationError

MODEL_TIERS: Tuple[str, ...] = ("GPT-5", "GPT-5 Mini", "GPT-5 Nano")
DEFAULT_MODEL_TIER = "GPT-5"

MIN_MONTHLY_SESSIONS = 100
MAX_MONTHLY_SESSIONS = 1_000_000
DEFAULT_MONTHLY_SESSIONS = 1000

MIN_QUERIES_PER_SESSION = 1
MAX_QUERIES_PER_SESSION = 50
DEFAULT_QUERIES_PER_SESSION = 5

_LEADING_INT = re.compile(r"\s*[+-]?\d+")

SAMPLE_PROBLEM = (
    "I need a customer support chatbot with knowledge base that can escalate "
    "to human agents and send email notifications"
)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_texts(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(_as_text(item) for item in value)


def _wire(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_wire(item) for item in value]
    if isinstance(value, dict):
        return {key: _wire(item) for key, item in value.items()}
    return value


def parse_int(value: Any) -> Optional[int]:
    """
    Parse form input into an int, returning None when it is not numeric.

    Strings are read like a browser's parseInt: leading whitespace, an
    optional sign, then the leading digits (``"12abc"`` -> 12, ``"1e3"`` -> 1).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(0))


def clamp_int(value: Any, minimum: int, maximum: int) -> int:
    """Clamp form input into [minimum, maximum]; unparseable input becomes minimum."""
    number = parse_int(value)
    if number is None:
        return minimum
    return max(minimum, min(maximum, number))


def validate_model_tier(value: Any) -> str:
    """Return the tier label if it is one of the supported tiers."""
    if value not in MODEL_TIERS:
        raise ValidationError(
            f"Unknown model tier {value!r}. Choose one of: {', '.join(MODEL_TIERS)}"
        )
    return value


class _WireModel:
    """Mixin providing a JSON-ready dict view of a dataclass."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return _wire(asdict(self))


@dataclass(frozen=True)
class UsageParameters(_WireModel):
    """User-entered form values."""

    problemStatement: str = ""
    monthlySessions: int = DEFAULT_MONTHLY_SESSIONS
    queriesPerSession: int = DEFAULT_QUERIES_PER_SESSION
    modelTier: str = DEFAULT_MODEL_TIER

    def updated(self, **fields: Any) -> "UsageParameters":
        """
        Return a copy with the given form fields applied.

        Numeric fields are clamped to their allowed ranges and the model tier
        must be one of ``MODEL_TIERS``.

        Raises:
            ValidationError: For unknown field names or an unknown model tier
        """
        unknown = sorted(set(fields) - set(_PARAMETER_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown parameter(s): {', '.join(unknown)}")

        values = asdict(self)
        values.update(fields)
        return UsageParameters(
            problemStatement=_as_text(values["problemStatement"]),
            monthlySessions=clamp_int(
                values["monthlySessions"], MIN_MONTHLY_SESSIONS, MAX_MONTHLY_SESSIONS
            ),
            queriesPerSession=clamp_int(
                values["queriesPerSession"],
                MIN_QUERIES_PER_SESSION,
                MAX_QUERIES_PER_SESSION,
            ),
            modelTier=validate_model_tier(values["modelTier"]),
        )


_PARAMETER_FIELDS = ("problemStatement", "monthlySessions", "queriesPerSession", "modelTier")


@dataclass(frozen=True)
class ArchitectureOverview(_WireModel):
    agentCount: int = 0
    agentTypes: Tuple[str, ...] = ()
    orchestrationPattern: str = ""
    kbRequired: bool = False
    kbEstimatedSizeMB: float = 0  # Only meaningful when kbRequired
    toolsNeeded: Tuple[str, ...] = ()
    estimatedSessionsPerMonth: int = 0
    apiCallsPerSession: int = 0
    recommendedModels: Tuple[str, ...] = ()
    complexityScore: float = 0  # Expected 0-10, not enforced

    @classmethod
    def from_dict(cls, data: Any) -> "ArchitectureOverview":
        data = _as_dict(data)
        return cls(
            agentCount=_as_number(data.get("agentCount")),
            agentTypes=_as_texts(data.get("agentTypes")),
            orchestrationPattern=_as_text(data.get("orchestrationPattern")),
            kbRequired=bool(data.get("kbRequired", False)),
            kbEstimatedSizeMB=_as_number(data.get("kbEstimatedSizeMB")),
            toolsNeeded=_as_texts(data.get("toolsNeeded")),
            estimatedSessionsPerMonth=_as_number(data.get("estimatedSessionsPerMonth")),
            apiCallsPerSession=_as_number(data.get("apiCallsPerSession")),
            recommendedModels=_as_texts(data.get("recommendedModels")),
            complexityScore=_as_number(data.get("complexityScore")),
        )


@dataclass(frozen=True)
class CreationCosts(_WireModel):
    """One-time creation costs."""

    agents: float = 0
    sessions: float = 0
    kb: float = 0
    rai: float = 0
    tools: float = 0

    @classmethod
    def from_dict(cls, data: Any) -> "CreationCosts":
        data = _as_dict(data)
        return cls(**{name: _as_number(data.get(name)) for name in _CREATION_FIELDS})


_CREATION_FIELDS = ("agents", "sessions", "kb", "rai", "tools")


@dataclass(frozen=True)
class RuntimeCostsPerQuery(_WireModel):
    """Runtime cost components charged on every query."""

    kbRetrieval: float = 0
    apiLight: float = 0
    rai: float = 0
    memory: float = 0

    @classmethod
    def from_dict(cls, data: Any) -> "RuntimeCostsPerQuery":
        data = _as_dict(data)
        return cls(**{name: _as_number(data.get(name)) for name in _RUNTIME_FIELDS})


_RUNTIME_FIELDS = ("kbRetrieval", "apiLight", "rai", "memory")


@dataclass(frozen=True)
class ModelCostsPerQuery(_WireModel):
    inputCost: float = 0
    outputCost: float = 0
    model: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ModelCostsPerQuery":
        data = _as_dict(data)
        return cls(
            inputCost=_as_number(data.get("inputCost")),
            outputCost=_as_number(data.get("outputCost")),
            model=_as_text(data.get("model")),
        )


@dataclass(frozen=True)
class CostBreakdown(_WireModel):
    """Cost output - annualTotalCost is expected to be monthlyTotalCost * 12."""

    creationCosts: CreationCosts = field(default_factory=CreationCosts)
    runtimeCostsPerQuery: RuntimeCostsPerQuery = field(default_factory=RuntimeCostsPerQuery)
    modelCostsPerQuery: ModelCostsPerQuery = field(default_factory=ModelCostsPerQuery)
    monthlyTotalCost: float = 0
    annualTotalCost: float = 0
    costPerSession: float = 0
    costPerQuery: float = 0

    @classmethod
    def from_dict(cls, data: Any) -> "CostBreakdown":
        data = _as_dict(data)
        return cls(
            creationCosts=CreationCosts.from_dict(data.get("creationCosts")),
            runtimeCostsPerQuery=RuntimeCostsPerQuery.from_dict(data.get("runtimeCostsPerQuery")),
            modelCostsPerQuery=ModelCostsPerQuery.from_dict(data.get("modelCostsPerQuery")),
            monthlyTotalCost=_as_number(data.get("monthlyTotalCost")),
            annualTotalCost=_as_number(data.get("annualTotalCost")),
            costPerSession=_as_number(data.get("costPerSession")),
            costPerQuery=_as_number(data.get("costPerQuery")),
        )


@dataclass(frozen=True)
class Projections(_WireModel):
    """Usage projections; totals are transmitted separately from CostBreakdown."""

    estimatedMonthlyQueries: float = 0
    estimatedAnnualQueries: float = 0
    monthlyTotalCost: float = 0
    annualTotalCost: float = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Projections":
        data = _as_dict(data)
        return cls(
            estimatedMonthlyQueries=_as_number(data.get("estimatedMonthlyQueries")),
            estimatedAnnualQueries=_as_number(data.get("estimatedAnnualQueries")),
            monthlyTotalCost=_as_number(data.get("monthlyTotalCost")),
            annualTotalCost=_as_number(data.get("annualTotalCost")),
        )


@dataclass(frozen=True)
class UnifiedReport(_WireModel):
    architectureOverview: ArchitectureOverview = field(default_factory=ArchitectureOverview)
    costBreakdown: CostBreakdown = field(default_factory=CostBreakdown)
    projections: Projections = field(default_factory=Projections)
    recommendations: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "UnifiedReport":
        data = _as_dict(data)
        return cls(
            architectureOverview=ArchitectureOverview.from_dict(data.get("architectureOverview")),
            costBreakdown=CostBreakdown.from_dict(data.get("costBreakdown")),
            projections=Projections.from_dict(data.get("projections")),
            recommendations=_as_texts(data.get("recommendations")),
        )


@dataclass(frozen=True)
class ReportMetadata(_WireModel):
    managerAgent: str = ""
    timestamp: str = ""  # ISO 8601, e.g. "2026-01-07T10:15:00Z"

    @classmethod
    def from_dict(cls, data: Any) -> "ReportMetadata":
        data = _as_dict(data)
        return cls(
            managerAgent=_as_text(data.get("managerAgent")),
            timestamp=_as_text(data.get("timestamp")),
        )


@dataclass(frozen=True)
class SessionResult(_WireModel):
    """Full agent envelope held by a session after a successful calculation."""

    status: str
    unifiedReport: UnifiedReport
    metadata: ReportMetadata

    @classmethod
    def from_dict(cls, data: Any) -> "SessionResult":
        data = _as_dict(data)
        return cls(
            status=_as_text(data.get("status")),
            unifiedReport=UnifiedReport.from_dict(data.get("unifiedReport")),
            metadata=ReportMetadata.from_dict(data.get("metadata")),
        )
