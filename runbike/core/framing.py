"""Image framing: a picture reference plus zoom and pan percentages.

Stored image links carry their framing as a fragment suffix, for example
``https://cdn/x.jpg#z=1.5&x=40&y=60``. ``ImageFrame`` is the decoded value.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode

from runbike.core.constants import (
    FRAME_DEFAULT_OFFSET,
    FRAME_DEFAULT_SCALE,
    FRAME_MAX_SCALE,
    FRAME_MIN_SCALE,
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _read_param(params: dict[str, list[str]], key: str, default: float) -> float:
    values = params.get(key)
    if not values:
        return default
    try:
        return float(values[0])
    except ValueError:
        return default


def _format_number(value: float) -> str:
    """Format without a trailing '.0' so round trips stay readable."""
    return f"{value:g}"


@dataclass(frozen=True)
class ImageFrame:
    """An image reference with scale and offset percentages (0-100)."""

    ref: str
    scale: float = FRAME_DEFAULT_SCALE
    offset_x: float = FRAME_DEFAULT_OFFSET
    offset_y: float = FRAME_DEFAULT_OFFSET

    def __post_init__(self):
        object.__setattr__(
            self, "scale", _clamp(self.scale, FRAME_MIN_SCALE, FRAME_MAX_SCALE)
        )
        object.__setattr__(self, "offset_x", _clamp(self.offset_x, 0.0, 100.0))
        object.__setattr__(self, "offset_y", _clamp(self.offset_y, 0.0, 100.0))

    @classmethod
    def decode(cls, link: str | None) -> ImageFrame:
        """Build a frame from a stored link, applying defaults for gaps."""
        base, _, fragment = (link or "").partition("#")
        params = parse_qs(fragment) if fragment else {}
        return cls(
            ref=base,
            scale=_read_param(params, "z", FRAME_DEFAULT_SCALE),
            offset_x=_read_param(params, "x", FRAME_DEFAULT_OFFSET),
            offset_y=_read_param(params, "y", FRAME_DEFAULT_OFFSET),
        )

    def encode(self) -> str:
        """Serialize back to the stored link form."""
        if not self.ref:
            return ""
        suffix = urlencode(
            {
                "z": _format_number(self.scale),
                "x": _format_number(self.offset_x),
                "y": _format_number(self.offset_y),
            }
        )
        return f"{self.ref}#{suffix}"

    def css_translate(self, factor: float = 1.5) -> tuple[float, float]:
        """Percentage translation applied when rendering the framed image."""
        return (
            (self.offset_x - FRAME_DEFAULT_OFFSET) * factor,
            (self.offset_y - FRAME_DEFAULT_OFFSET) * factor,
        )

    def to_dict(self) -> dict[str, object]:
        tx, ty = self.css_translate()
        return {
            "ref": self.ref,
            "scale": self.scale,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "translate_x": tx,
            "translate_y": ty,
        }
