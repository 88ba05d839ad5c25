"""
Shared fixtures for unit tests.

Nothing here touches the network. Generation clients are replaced with
fakes that implement the StructuredGenerationClient protocol.
"""

import json
from typing import Any, Optional

import pytest

from practice_analyzer.core.analysis.errors import ServiceUnavailableError


class FakeGenerationClient:
    """
    Records every call and replies with a canned payload or error.

    Counting calls lets tests prove that invalid input never
    reaches the service.
    """

    def __init__(self, payload: str = "", error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_json(
        self,
        user_prompt: str,
        system_instruction: str,
        output_schema: dict[str, Any],
    ) -> str:
        self.calls.append({
            "user_prompt": user_prompt,
            "system_instruction": system_instruction,
            "output_schema": output_schema,
        })
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def full_payload() -> dict[str, Any]:
    """A realistic response covering every field, optional ones included."""
    return {
        "analyzedPractices": [
            {
                "title": "Monday - Freestyle Aerobic",
                "warmUp": "400 easy swim, 200 kick, 200 pull",
                "mainSet": "10x100 Freestyle on 1:30, hold best average",
                "coolDown": "300 easy choice",
                "totalYardage": 2100,
            },
            {
                "title": "Wednesday - IM Rounds",
                "warmUp": "500 swim with drills (25 drill, 25 swim)",
                "mainSet": "3 rounds of 4x50 on :50, 2x100 on 1:40, 200 easy on 4:00, all IM",
                "coolDown": "200 backstroke",
                "totalYardage": 2500,
            },
        ],
        "overallAnalysis": "Solid aerobic base with one threshold freestyle day and one IM day.",
        "coachingTips": [
            "Add a descending component to the 100s.",
            "Keep IM transitions tight.",
        ],
        "competitionAdvice": ["Cut volume by a third from Thursday."],
        "weaknessImprovementTips": ["6 underwater dolphin kicks off every wall."],
    }


@pytest.fixture
def minimal_payload() -> dict[str, Any]:
    return {"analyzedPractices": [], "overallAnalysis": "ok", "coachingTips": []}


@pytest.fixture
def fake_client(full_payload) -> FakeGenerationClient:
    return FakeGenerationClient(payload=json.dumps(full_payload))


@pytest.fixture
def failing_client() -> FakeGenerationClient:
    return FakeGenerationClient(error=ServiceUnavailableError("connection refused"))


@pytest.fixture
def client_factory():
    """For tests that need a client with a specific payload or error."""
    return FakeGenerationClient
