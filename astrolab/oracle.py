"""The Oracle: randomized flavor-text risk assessments."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

RISKS = ("42%", "67%", "72%", "85%", "91%")
CONFIDENCES = ("Low", "Moderate", "High", "Very High")
SUGGESTIONS = (
    "Deploy kinetic impactor within 5 days.",
    "Increase telescope observation frequency by 300%.",
    "Activate emergency global defense protocol.",
    "Consider gravity tractor deployment immediately.",
    "Nuclear option should remain as backup plan.",
    "Recommend evacuation of predicted impact zones.",
)
FINAL_PREDICTIONS = (
    "ORACLE PREDICTION: 78% SUCCESS RATE - OUTCOME MATCHED",
    "ORACLE PREDICTION: 82% ACCURACY - MISSION PROFILE OPTIMAL",
    "ORACLE PREDICTION: 91% CONFIDENCE - DEFLECTION SUCCESSFUL",
    "ORACLE PREDICTION: 73% PROBABILITY - EARTH IMPACT AVERTED",
)
ANALYSIS_DELAY = 1.5


@dataclass(frozen=True)
class OraclePrediction:
    risk: str
    confidence: str
    suggestion: str
    timestamp: str


def confidence_for_act(act: int) -> str:
    return CONFIDENCES[max(0, min(act - 1, len(CONFIDENCES) - 1))]


def generate_prediction(act: int, rng: Optional[random.Random] = None) -> OraclePrediction:
    rng = rng or random.Random()
    return OraclePrediction(
        risk=rng.choice(RISKS),
        confidence=confidence_for_act(act),
        suggestion=rng.choice(SUGGESTIONS),
        timestamp=datetime.now().strftime("%H:%M:%S"),
    )


def final_prediction(rng: Optional[random.Random] = None) -> str:
    return (rng or random.Random()).choice(FINAL_PREDICTIONS)


async def ask_oracle(
    act: int, rng: Optional[random.Random] = None, *, delay: float = ANALYSIS_DELAY
) -> OraclePrediction:
    if delay > 0:
        await asyncio.sleep(delay)
    return generate_prediction(act, rng)


def format_prediction(prediction: OraclePrediction) -> list[str]:
    return [
        "THE ORACLE // PREDICTIVE ANALYSIS SYSTEM",
        f"  IMPACT RISK: {prediction.risk}    CONFIDENCE: {prediction.confidence}",
        f"  AI RECOMMENDATION: {prediction.suggestion}",
        f"  Analysis timestamp: {prediction.timestamp}",
    ]
