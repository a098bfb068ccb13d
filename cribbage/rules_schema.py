"""Validation schema for computer-player configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class DifficultyProfile(BaseModel):
    """How a computer player discards, pegs and counts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Display name of the profile.")
    description: str = ""
    discard_strategy: Literal["heuristic", "expected-value"] = Field(
        "heuristic",
        alias="discardStrategy",
        description="Bounded heuristic or exhaustive expected value over every cut.",
    )
    pegging_strategy: Literal["heuristic", "expert"] = Field(
        "heuristic",
        alias="peggingStrategy",
        description="Jittered heuristic play or the deterministic expert play.",
    )
    counting_error_rate: float = Field(0.0, ge=0.0, le=1.0, alias="countingErrorRate")
    counting_error_range: int = Field(0, ge=0, alias="countingErrorRange")
    overcount_rate: float = Field(0.0, ge=0.0, le=1.0, alias="overcountRate")
    overcount_range: int = Field(0, ge=0, alias="overcountRange")

    @field_validator("name")
    @classmethod
    def ensure_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Difficulty profile needs a name.")
        return value

    @field_validator("counting_error_range")
    @classmethod
    def error_range_needs_rate(cls, value: int, info: ValidationInfo) -> int:
        rate = info.data.get("counting_error_rate", 0.0)
        if rate > 0 and value == 0:
            raise ValueError("A counting error rate needs a non-zero error range.")
        return value
