#!/usr/bin/env python3
"""
Display options for domain styling.

StyleOptions is immutable; changes go through ``apply_delta`` which returns a
new record and rejects unknown option names.
"""
from dataclasses import dataclass, fields, replace
from typing import Tuple, Dict, Any, Optional

from ecodviz.exceptions import ValidationError

# High-contrast fallback colours for domains supplied without a colour
DOMAIN_COLORS = (
    '#FF0000',  # Red
    '#0066FF',  # Blue
    '#00CC00',  # Green
    '#FF6600',  # Orange
    '#9900CC',  # Purple
    '#00CCCC',  # Cyan
    '#CC6600',  # Brown
    '#FF99CC',  # Pink
    '#666666',  # Gray
    '#336699',  # Steel Blue
)


@dataclass(frozen=True)
class StyleOptions:
    """Visual parameters of a styling pass"""
    representation: str = 'cartoon'
    base_color: str = 'gray'
    base_opacity: float = 0.8
    highlight_backdrop_opacity: float = 0.3
    domain_opacity: float = 1.0
    palette: Tuple[str, ...] = DOMAIN_COLORS
    background_color: str = '#ffffff'
    width: int = 800
    height: int = 600

    def __post_init__(self):
        for name in ('base_opacity', 'highlight_backdrop_opacity', 'domain_opacity'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValidationError(f"{name} must be between 0 and 1, got {value}")
        if not self.palette:
            raise ValidationError("palette must contain at least one colour")

    def palette_color(self, index: int) -> str:
        return self.palette[index % len(self.palette)]

    def hidden_style(self) -> Dict[str, Any]:
        """Style that hides every representation"""
        return {'cartoon': {'opacity': 0}, 'stick': {'opacity': 0}, 'sphere': {'opacity': 0}}

    def base_style(self, opacity: Optional[float] = None) -> Dict[str, Any]:
        """Neutral backdrop style for the target chain"""
        return {self.representation: {
            'color': self.base_color,
            'opacity': self.base_opacity if opacity is None else opacity,
        }}

    def domain_style(self, color: str) -> Dict[str, Any]:
        return {self.representation: {'color': color, 'opacity': self.domain_opacity}}

    @classmethod
    def from_config(cls, viewer_config: Dict[str, Any]) -> 'StyleOptions':
        """Options seeded from the ``viewer`` configuration section"""
        return apply_delta(cls(), **{
            key: value for key, value in {
                'background_color': viewer_config.get('background'),
                'width': viewer_config.get('width'),
                'height': viewer_config.get('height'),
            }.items() if value is not None
        })


def apply_delta(options: StyleOptions, **changes: Any) -> StyleOptions:
    """Return a copy of ``options`` with ``changes`` applied

    Raises:
        ValidationError: If a change names an unknown option
    """
    known = {f.name for f in fields(StyleOptions)}
    unknown = set(changes) - known
    if unknown:
        raise ValidationError(f"Unknown style options: {', '.join(sorted(unknown))}",
                              {"unknown": sorted(unknown)})
    if 'palette' in changes:
        changes['palette'] = tuple(changes['palette'])
    return replace(options, **changes)
