from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .ai import Difficulty
from .game.board import SIDE_B, SIDES, Side


ENV_DIFFICULTY = "WHEEL_CHECKERS_DIFFICULTY"
ENV_TIMER = "WHEEL_CHECKERS_TIMER_SECONDS"
ENV_AI_SIDE = "WHEEL_CHECKERS_AI_SIDE"

DEFAULT_TIMER_SECONDS = 14


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    difficulty: Difficulty = Difficulty.MID
    timer_duration_seconds: int = DEFAULT_TIMER_SECONDS
    ai_side: Side = SIDE_B

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        except ValueError as exc:
            raise SettingsError(str(exc)) from exc
        if isinstance(self.timer_duration_seconds, bool) or not isinstance(self.timer_duration_seconds, int):
            raise SettingsError(f"Timer duration must be an integer, got {self.timer_duration_seconds!r}")
        if self.timer_duration_seconds <= 0:
            raise SettingsError("Timer duration must be positive")
        if self.ai_side not in SIDES:
            raise SettingsError(f"AI side must be one of {SIDES}, got {self.ai_side!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        # Resolve overrides from the environment up front
        env = os.environ if environ is None else environ
        settings = cls()

        difficulty = env.get(ENV_DIFFICULTY, "").strip()
        if difficulty:
            settings = settings.override(difficulty=difficulty)

        timer = env.get(ENV_TIMER, "").strip()
        if timer:
            try:
                seconds = int(timer)
            except ValueError as exc:
                raise SettingsError(f"{ENV_TIMER} must be an integer, got {timer!r}") from exc
            settings = settings.override(timer_duration_seconds=seconds)

        ai_side = env.get(ENV_AI_SIDE, "").strip().upper()
        if ai_side:
            settings = settings.override(ai_side=ai_side)

        return settings

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-``None`` value in ``changes`` applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})
