from __future__ import annotations
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, List, Mapping

# dial -> (min, max)
_RANGES: Dict[str, tuple] = {
    "brightness": (0.0, 200.0),
    "contrast":   (0.0, 200.0),
    "saturation": (0.0, 200.0),
    "blur":       (0.0, 20.0),
    "grayscale":  (0.0, 100.0),
    "sepia":      (0.0, 100.0),
}


@dataclass(frozen=True)
class FilterSettings:
    """
    Value-object holding the six filter dials in human-friendly units
    (percent, 100 = identity; blur in px).  Trivially serializable, so it
    doubles as a preset.
    """
    brightness: float = 100.0    # [0 , 200] %
    contrast:   float = 100.0    # [0 , 200] %
    saturation: float = 100.0    # [0 , 200] %
    blur:       float = 0.0      # [0 , 20] px
    grayscale:  float = 0.0      # [0 , 100] %
    sepia:      float = 0.0      # [0 , 100] %

    # ── Helpers ──────────────────────────────────────────────────────
    def clamped(self) -> FilterSettings:
        """Copy with every dial clamped into its range."""
        return replace(self, **{
            name: min(max(float(getattr(self, name)), lo), hi)
            for name, (lo, hi) in _RANGES.items()
        })

    def is_identity(self) -> bool:
        return self.clamped() == FilterSettings()

    def to_css(self) -> str:
        return (
            f"brightness({self.brightness:g}%) "
            f"contrast({self.contrast:g}%) "
            f"saturate({self.saturation:g}%) "
            f"blur({self.blur:g}px) "
            f"grayscale({self.grayscale:g}%) "
            f"sepia({self.sepia:g}%)"
        )

    # ── (De)serialization ────────────────────────────────────────────
    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FilterSettings:
        """Build from a stored preset; unknown keys ignored, missing keys default."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in names})


@dataclass(frozen=True)
class FilterPreset:
    name: str
    settings: FilterSettings


FILTER_PRESETS: List[FilterPreset] = [
    FilterPreset("Original", FilterSettings()),
    FilterPreset("Vintage", FilterSettings(brightness=105, contrast=95, saturation=80, sepia=40)),
    FilterPreset("Cool Blue", FilterSettings(contrast=115, saturation=90)),
    FilterPreset("Warm Sunset", FilterSettings(brightness=110, contrast=105, saturation=130, sepia=30)),
    FilterPreset("B&W Classic", FilterSettings(contrast=120, grayscale=100)),
    FilterPreset("Noir", FilterSettings(brightness=85, contrast=140, grayscale=100)),
    FilterPreset("Vivid", FilterSettings(contrast=120, saturation=150)),
    FilterPreset("Soft Focus", FilterSettings(brightness=105, contrast=95, blur=2)),
    FilterPreset("Dream", FilterSettings(brightness=115, contrast=80, saturation=120, blur=1)),
]
