"""Pipeline configuration, validation, and named presets.

WHY: Every stage after sanitization is driven by a handful of user-facing
parameters — character budget per line, minimum block duration, gap
between blocks (in frames), one or two lines per block, pause threshold.
Invalid values (negative gap, zero budget) would not crash the pipeline,
they would make it silently misbehave. Validating once, up front, turns
that into an immediate, explicit error.

HOW: PipelineConfig is a frozen dataclass holding the parameters.
validate() checks every field and raises InvalidConfiguration on the
first violation. PRESETS maps names to ready-made configurations for the
two delivery targets (broadcast 16:9, social 9:16), and from_preset()
builds a config from a preset plus overrides.

RULES:
- FRAME_RATE is fixed at 30 fps; gap_seconds = gap_frames / FRAME_RATE
- max_chars >= 1, min_duration > 0, gap_frames >= 0,
  lines in {"single", "double"}, pause_threshold >= 0 or None
- pause_threshold=None disables pause-based line breaks
- Presets are frozen constants — overrides always produce a new object
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

FRAME_RATE = 30
"""Fixed frame rate used to convert gap_frames to seconds."""

MIN_WORD_DURATION_S = 0.05
"""Sanitizer floor for a single word's duration."""

FALLBACK_DURATION_S = 0.05
"""Block duration used when min-duration and gap cannot both be honored."""

DEFAULT_PAUSE_THRESHOLD_S = 0.7
"""Silence longer than this between two words starts a new line."""

LINE_MODES = ("single", "double")


class InvalidConfiguration(ValueError):
    """Raised when pipeline settings are out of range.

    RULES:
    - Raised before any pipeline stage runs
    - Message names the offending field and the value received
    """


@dataclass(frozen=True)
class PipelineConfig:
    """Settings that drive segmentation, composition and timing.

    Attributes:
        max_chars: Display character budget per line.
        min_duration: Minimum on-screen duration of a block, in seconds.
        gap_frames: Minimum gap between consecutive blocks, in frames.
        lines: "single" (one line per block) or "double" (pairs of lines).
        pause_threshold: Silence (seconds) that forces a line break, or None.
    """

    max_chars: int = 42
    min_duration: float = 1.2
    gap_frames: int = 2
    lines: str = "double"
    pause_threshold: Optional[float] = DEFAULT_PAUSE_THRESHOLD_S

    @property
    def gap_seconds(self) -> float:
        return self.gap_frames / FRAME_RATE

    def validate(self) -> PipelineConfig:
        """Check every field, returning self so calls can be chained.

        Raises:
            InvalidConfiguration: On the first out-of-range field.
        """
        if isinstance(self.max_chars, bool) or not isinstance(self.max_chars, int):
            raise InvalidConfiguration(
                "max_chars must be an integer, got {!r}".format(self.max_chars)
            )
        if self.max_chars < 1:
            raise InvalidConfiguration(
                "max_chars must be >= 1, got {}".format(self.max_chars)
            )

        if not _is_finite_number(self.min_duration) or self.min_duration <= 0:
            raise InvalidConfiguration(
                "min_duration must be a positive number of seconds, got {!r}".format(
                    self.min_duration
                )
            )

        if isinstance(self.gap_frames, bool) or not isinstance(self.gap_frames, int):
            raise InvalidConfiguration(
                "gap_frames must be an integer, got {!r}".format(self.gap_frames)
            )
        if self.gap_frames < 0:
            raise InvalidConfiguration(
                "gap_frames must be >= 0, got {}".format(self.gap_frames)
            )

        if self.lines not in LINE_MODES:
            raise InvalidConfiguration(
                "lines must be one of {}, got {!r}".format(", ".join(LINE_MODES), self.lines)
            )

        if self.pause_threshold is not None:
            if not _is_finite_number(self.pause_threshold) or self.pause_threshold < 0:
                raise InvalidConfiguration(
                    "pause_threshold must be >= 0 seconds or None, got {!r}".format(
                        self.pause_threshold
                    )
                )

        return self

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Return a copy with the non-None overrides applied.

        ``pause_threshold`` is special: passing it explicitly as None would
        be indistinguishable from "not given", so callers disable pause
        splitting through ``disable_pause_split=True`` instead.
        """
        disable_pause = overrides.pop("disable_pause_split", False)
        changes = {k: v for k, v in overrides.items() if v is not None}
        if disable_pause:
            changes["pause_threshold"] = None
        return replace(self, **changes)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> PipelineConfig:
        """Build a config from a named preset plus optional overrides.

        Raises:
            InvalidConfiguration: If the preset name is unknown.
        """
        if name not in PRESETS:
            raise InvalidConfiguration(
                "Unknown preset '{}'. Available: {}".format(name, ", ".join(PRESETS.keys()))
            )
        return PRESETS[name].with_overrides(**overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_chars": self.max_chars,
            "min_duration": self.min_duration,
            "gap_frames": self.gap_frames,
            "lines": self.lines,
            "pause_threshold": self.pause_threshold,
        }


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# Broadcast format: 16:9, traditional TV subtitles
PRESET_BROADCAST = PipelineConfig(
    max_chars=42,
    min_duration=1.2,
    gap_frames=2,
    lines="double",
)

# Social media format (SoMe): 9:16 vertical video, single line captions
PRESET_SOCIAL = PipelineConfig(
    max_chars=25,
    min_duration=0.8,
    gap_frames=2,
    lines="single",
)

PRESETS: Dict[str, PipelineConfig] = {
    "broadcast": PRESET_BROADCAST,
    "social": PRESET_SOCIAL,
    "some": PRESET_SOCIAL,  # Alias
}
