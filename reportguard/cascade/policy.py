"""
Threshold policy: decides whether a counter value newly crosses a level's block threshold.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Level(str, Enum):
    ITEM = "item"
    PROFILE = "profile"
    ACCOUNT = "account"


class Decision(BaseModel):
    level: Level
    value: int
    threshold: int
    crossed_now: bool


class ThresholdPolicy(BaseModel):
    """
    Per-level thresholds. The account level is compared against the number of
    blocked profiles owned by the account, not against a stored counter.
    """

    model_config = ConfigDict(frozen=True)

    item: int = Field(25, ge=1)
    profile: int = Field(10, ge=1)
    account: int = Field(5, ge=1)

    def threshold(self, level: Level) -> int:
        return getattr(self, Level(level).value)

    def evaluate(self, level: Level, value: int, already_blocked: bool) -> Decision:
        threshold = self.threshold(level)
        return Decision(
            level=level,
            value=value,
            threshold=threshold,
            crossed_now=value >= threshold and not already_blocked,
        )
