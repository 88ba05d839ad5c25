"""
Domain models for practice log analysis.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. The wire format (camelCase JSON)
lives in schema.py; these are the shapes the rest of the code works with.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class PracticeAnalysisRequest:
    """
    Everything the swimmer told us, exactly as they typed it.

    Frozen because a request is a value: it's built once from the form
    and only ever read afterwards.
    """
    practice_log: str
    is_competition_week: bool = False
    competition_events: str = ""
    weaknesses: str = ""

    @property
    def has_practice_log(self) -> bool:
        return bool(self.practice_log.strip())

    @property
    def events(self) -> str:
        """
        Competition events, but only when there is a competition.

        Events typed before unticking the competition box must not leak
        into the prompt.
        """
        if not self.is_competition_week:
            return ""
        return self.competition_events.strip()

    @property
    def weakness_text(self) -> str:
        return self.weaknesses.strip()

    @property
    def has_weaknesses(self) -> bool:
        return bool(self.weakness_text)


@dataclass(frozen=True)
class AnalysisPrompt:
    """The assembled request: what we ask, how we frame it, what shape we want back."""
    user_prompt: str
    system_instruction: str
    output_schema: dict[str, Any]


@dataclass(frozen=True)
class AnalyzedPractice:
    """One practice as the model broke it down."""
    title: str
    warm_up: str
    main_set: str
    cool_down: str
    total_yardage: int

    def __post_init__(self) -> None:
        if self.total_yardage < 0:
            raise ValueError("Total yardage cannot be negative")


@dataclass
class SwimAnalysisResult:
    """
    The complete analysis of a practice log.

    competition_advice and weakness_improvement_tips are true optionals:
    None means the service didn't send the section at all, [] means it sent
    an empty one. We asked for them conditionally, but nothing guarantees
    the service listened, so callers check both.
    """
    overall_analysis: str
    analyzed_practices: list[AnalyzedPractice] = field(default_factory=list)
    coaching_tips: list[str] = field(default_factory=list)
    competition_advice: Optional[list[str]] = None
    weakness_improvement_tips: Optional[list[str]] = None

    def __post_init__(self) -> None:
        if not self.overall_analysis.strip():
            raise ValueError("Overall analysis cannot be empty")

    @property
    def total_yardage(self) -> int:
        """Yardage across every practice in the log."""
        return sum(p.total_yardage for p in self.analyzed_practices)

    @property
    def has_competition_advice(self) -> bool:
        return bool(self.competition_advice)

    @property
    def has_weakness_tips(self) -> bool:
        return bool(self.weakness_improvement_tips)
