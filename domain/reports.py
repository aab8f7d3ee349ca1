"""
Response shapes returned by the remote tactical service.

These are read-only value objects. The service is asked for JSON matching
these models; nulls are dropped before validation so that defaults apply,
and probability totals are never asserted.
"""
from __future__ import annotations

from typing import Any, List, Tuple

from pydantic import BaseModel, Field, model_validator


class ResponseModel(BaseModel):
    """Base for remote payloads: ignores unknown keys and null values."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class OpponentIntel(ResponseModel):
    threatLevel: float = Field(default=0, description="1 to 10 scale")
    keyWeakness: str = ""
    analysis: str = ""


class TacticalSettings(ResponseModel):
    style: str = ""
    passing: str = ""
    pressing: str = ""
    aggression: str = ""
    offsideTrap: bool = False
    marking: str = ""
    tempo: str = ""
    focus: str = ""


class LineTactics(ResponseModel):
    forwards: str = ""
    midfielders: str = ""
    defenders: str = ""


class TacticalBattlePlan(ResponseModel):
    recommendedFormation: str = ""
    winProbability: float = Field(default=0, description="Percentage 0-100")
    rationale: str = ""
    settings: TacticalSettings = Field(default_factory=TacticalSettings)
    lineTactics: LineTactics = Field(default_factory=LineTactics)


class GameManagement(ResponseModel):
    substitutionStrategy: str = ""
    formationChangeTriggers: str = ""
    criticalThreats: List[str] = Field(default_factory=list)


class ReportPrediction(ResponseModel):
    mostLikelyScore: str = ""
    keyToVictory: str = ""


class AnalysisReport(ResponseModel):
    opponentIntel: OpponentIntel
    tacticalBattlePlan: TacticalBattlePlan
    gameManagement: GameManagement
    prediction: ReportPrediction


class TutorialStep(ResponseModel):
    title: str = ""
    instruction: str = ""
    location: str = ""
    reason: str = ""


class SubstitutionStep(ResponseModel):
    scenario: str = ""
    action: str = ""


class MistakeFix(ResponseModel):
    mistake: str = ""
    fix: str = ""


class TutorialGuide(ResponseModel):
    formationSteps: List[str] = Field(default_factory=list)
    formationVisualCheck: str = ""
    settingsSteps: List[TutorialStep] = Field(default_factory=list)
    substitutionPlan: List[SubstitutionStep] = Field(default_factory=list)
    commonMistakes: List[MistakeFix] = Field(default_factory=list)
    coachEncouragement: str = ""


class DocumentExtraction(ResponseModel):
    type: str = Field(default="", description="e.g. Tactical Guide, Player Database")
    keyInsights: List[str] = Field(default_factory=list)
    tacticalRules: List[str] = Field(default_factory=list)


class Coherence(ResponseModel):
    structural: float = 0
    behavioural: float = 0
    intensity: float = 0
    defensive: float = 0
    overall: float = 0
    feedback: str = ""


class StrengthAnalysis(ResponseModel):
    myPower: float = 0
    opponentPower: float = 0
    ratio: float = 0
    contextModifier: str = ""


class SimulationPrediction(ResponseModel):
    winChance: float = 0
    drawChance: float = 0
    lossChance: float = 0
    score: str = "0-0"


class Scenario(ResponseModel):
    name: str = ""
    winChance: float = 0
    coherence: float = 0
    impact: str = ""


class SimulationResult(ResponseModel):
    coherence: Coherence = Field(default_factory=Coherence)
    strengthAnalysis: StrengthAnalysis = Field(default_factory=StrengthAnalysis)
    prediction: SimulationPrediction = Field(default_factory=SimulationPrediction)
    scenarios: List[Scenario] = Field(default_factory=list)


def _shares(values: Tuple[float, ...]) -> Tuple[float, ...]:
    clean = tuple(max(float(v), 0.0) for v in values)
    total = sum(clean)
    if total <= 0:
        return tuple(0.0 for _ in clean)
    return tuple(round(v * 100 / total, 1) for v in clean)


def outcome_shares(prediction: SimulationPrediction) -> Tuple[float, float, float]:
    """Win/draw/loss as display percentages summing to 100 (or all zero)."""
    win, draw, loss = _shares((prediction.winChance, prediction.drawChance, prediction.lossChance))
    return win, draw, loss


def power_shares(strength: StrengthAnalysis) -> Tuple[float, float]:
    mine, theirs = _shares((strength.myPower, strength.opponentPower))
    return mine, theirs
