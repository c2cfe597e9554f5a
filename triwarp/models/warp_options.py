from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Tuple
import os

from dotenv import load_dotenv

from .errors import UnknownOptionError

# Load environment variables
load_dotenv()


class SamplingMode(str, Enum):
    NEAREST = "nearest"
    BILINEAR = "bilinear"

    @classmethod
    def parse(cls, value) -> SamplingMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise UnknownOptionError(f"Unknown sampling mode {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class WarpOptions:
    """
    Recognised knobs of a warp call.

    background : fill value for destination pixels outside the triangle.
                 None means opaque white at the destination's channel count.
    sampling   : how a real-valued source coordinate picks its colour.
    workers    : size of the row-band thread pool (1 = sequential).
    """
    background: Tuple[int, ...] | None = None
    sampling: SamplingMode = SamplingMode.NEAREST
    workers: int = 1

    def __post_init__(self):
        # Coerce loose input once so every consumer sees the canonical types.
        object.__setattr__(self, "sampling", SamplingMode.parse(self.sampling))
        if self.background is not None:
            object.__setattr__(self, "background", _parse_background(self.background))
        workers = _parse_workers(self.workers)
        object.__setattr__(self, "workers", workers)

    def background_for(self, channels: int) -> Tuple[int, ...]:
        if self.background is None:
            return (255,) * channels
        return self.background

    # ── Construction from loose input ────────────────────────────────
    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> WarpOptions:
        """
        Build options from a plain mapping, rejecting unknown keys.
        Values may be strings (as they arrive from env vars, CLI or forms).
        """
        if not options:
            return cls()
        unknown = set(options) - cls.field_names()
        if unknown:
            raise UnknownOptionError(f"Unknown warp option(s): {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in options.items() if v is not None and v != ""})

    @classmethod
    def from_env(cls) -> WarpOptions:
        return cls.from_dict({
            "background": os.getenv("WARP_BACKGROUND"),
            "sampling": os.getenv("WARP_SAMPLING"),
            "workers": os.getenv("WARP_WORKERS"),
        })


def _parse_background(value) -> Tuple[int, ...]:
    if isinstance(value, str):
        parts = [p for p in value.replace(" ", "").split(",") if p]
    else:
        parts = list(value)
    try:
        channels = tuple(int(p) for p in parts)
    except (TypeError, ValueError):
        raise UnknownOptionError(f"Background must be a list of integers, got {value!r}") from None
    if not channels or any(c < 0 or c > 255 for c in channels):
        raise UnknownOptionError(f"Background channels must lie in [0, 255], got {value!r}")
    return channels


def _parse_workers(value) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise UnknownOptionError(f"Workers must be an integer, got {value!r}") from None
    if workers < 1:
        raise UnknownOptionError(f"Workers must be at least 1, got {workers}")
    return workers
