# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Decorative SVG background shapes.

Placement is pseudo-random but seeded from the palette, so a given style
always produces the same decorations and compiles stay byte-identical.
"""

import logging
import math
import random
import zlib
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from cv_compiler.tokens import DecorationIntensity, DecorationTheme, Palette, ensure_exhaustive

logger = logging.getLogger(__name__)


def _n(value: float) -> str:
    """Stable number formatting for SVG attributes."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _circle(size, color, opacity):
    r = size / 2
    return f'<circle cx="{_n(r)}" cy="{_n(r)}" r="{_n(r)}" fill="{color}" fill-opacity="{_n(opacity)}"/>'


def _ring(size, color, opacity):
    r = size / 2
    return (f'<circle cx="{_n(r)}" cy="{_n(r)}" r="{_n(r - 2)}" fill="none" stroke="{color}" '
            f'stroke-width="2" stroke-opacity="{_n(opacity)}"/>')


def _square(size, color, opacity):
    return f'<rect width="{size}" height="{size}" fill="{color}" fill-opacity="{_n(opacity)}"/>'


def _polygon(points, color, opacity):
    coords = " ".join(f"{_n(x)},{_n(y)}" for x, y in points)
    return f'<polygon points="{coords}" fill="{color}" fill-opacity="{_n(opacity)}"/>'


def _diamond(size, color, opacity):
    h = size / 2
    return _polygon([(h, 0), (size, h), (h, size), (0, h)], color, opacity)


def _triangle(size, color, opacity):
    return _polygon([(size / 2, 0), (size, size), (0, size)], color, opacity)


def _hexagon(size, color, opacity):
    points = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        points.append((size / 2 + size / 2 * math.cos(angle), size / 2 + size / 2 * math.sin(angle)))
    return _polygon(points, color, opacity)


def _star(size, color, opacity):
    c, outer, inner = size / 2, size / 2, size / 4
    points = []
    for i in range(5):
        a = math.radians(i * 72 - 90)
        b = math.radians(i * 72 + 36 - 90)
        points.append((c + outer * math.cos(a), c + outer * math.sin(a)))
        points.append((c + inner * math.cos(b), c + inner * math.sin(b)))
    return _polygon(points, color, opacity)


def _cross(size, color, opacity):
    a, b = _n(size * 0.35), _n(size * 0.65)
    s = _n(size)
    return (f'<path d="M{a},0 H{b} V{a} H{s} V{b} H{b} V{s} H{a} V{b} H0 V{a} H{a} Z" '
            f'fill="{color}" fill-opacity="{_n(opacity)}"/>')


def _dots(size, color, opacity):
    out = []
    for x, y in ((0.25, 0.25), (0.75, 0.25), (0.25, 0.75), (0.75, 0.75)):
        out.append(f'<circle cx="{_n(size * x)}" cy="{_n(size * y)}" r="{_n(size * 0.1)}" '
                   f'fill="{color}" fill-opacity="{_n(opacity)}"/>')
    return "".join(out)


def _wave(size, color, opacity):
    h = _n(size / 2)
    return (f'<path d="M0,{h} Q{_n(size / 4)},{_n(size / 4)} {h},{h} T{_n(size)},{h}" fill="none" '
            f'stroke="{color}" stroke-width="2" stroke-opacity="{_n(opacity)}"/>')


def _arc(size, color, opacity):
    s = _n(size)
    return (f'<path d="M0,{s} A{s},{s} 0 0,1 {s},0" fill="none" stroke="{color}" '
            f'stroke-width="2" stroke-opacity="{_n(opacity)}"/>')


SHAPES: Dict[str, Callable[[float, str, float], str]] = {
    "circle": _circle,
    "ring": _ring,
    "square": _square,
    "diamond": _diamond,
    "triangle": _triangle,
    "hexagon": _hexagon,
    "dots": _dots,
    "wave": _wave,
    "arc": _arc,
    "cross": _cross,
    "star": _star,
}

# (min, max) shape count and (min, max) size in px per intensity.
COUNTS: Dict[DecorationIntensity, Tuple[int, int]] = {
    DecorationIntensity.NONE: (0, 0),
    DecorationIntensity.MINIMAL: (4, 8),
    DecorationIntensity.MODERATE: (8, 15),
    DecorationIntensity.ABUNDANT: (15, 25),
}

SIZES: Dict[DecorationIntensity, Tuple[int, int]] = {
    DecorationIntensity.NONE: (0, 0),
    DecorationIntensity.MINIMAL: (30, 80),
    DecorationIntensity.MODERATE: (20, 65),
    DecorationIntensity.ABUNDANT: (15, 50),
}

# Shapes drawn for each industry theme; abstract mixes all of them.
THEME_SHAPES: Dict[DecorationTheme, Tuple[str, ...]] = {
    DecorationTheme.GEOMETRIC: ("hexagon", "triangle", "diamond", "square", "cross"),
    DecorationTheme.ORGANIC: ("circle", "wave", "arc", "dots", "ring"),
    DecorationTheme.MINIMAL: ("arc", "ring", "square"),
    DecorationTheme.TECH: ("hexagon", "dots", "square", "cross", "ring"),
    DecorationTheme.CREATIVE: ("star", "wave", "triangle", "circle", "diamond"),
    DecorationTheme.ABSTRACT: tuple(SHAPES),
}

ensure_exhaustive(COUNTS, DecorationIntensity, "COUNTS")
ensure_exhaustive(SIZES, DecorationIntensity, "SIZES")
ensure_exhaustive(THEME_SHAPES, DecorationTheme, "THEME_SHAPES")

# Page edges and corners, as (x_min, x_max, y_min, y_max) percentages; the
# centre where the text sits is left clear.
ZONES = (
    (0, 20, 0, 15), (80, 100, 0, 15), (0, 20, 85, 100), (80, 100, 85, 100),
    (20, 80, 0, 10), (20, 80, 90, 100), (0, 12, 15, 85), (88, 100, 15, 85),
    (0, 25, 25, 75), (75, 100, 25, 75), (25, 75, 0, 20), (25, 75, 80, 100),
)


@dataclass(frozen=True)
class Decoration:
    shape: str
    size: int
    x: float
    y: float
    rotation: int
    color: str
    opacity: float

    def to_svg(self) -> str:
        style = (f"left: {_n(self.x)}%; top: {_n(self.y)}%; width: {self.size}px; height: {self.size}px; "
                 f"transform: translate(-50%, -50%) rotate({self.rotation}deg);")
        return (f'<svg class="cv-decoration" style="{style}" viewBox="0 0 {self.size} {self.size}" '
                f'xmlns="http://www.w3.org/2000/svg">{SHAPES[self.shape](self.size, self.color, self.opacity)}</svg>')


def palette_seed(palette: Palette) -> int:
    key = "|".join((palette.primary, palette.accent, palette.secondary))
    return zlib.crc32(key.encode("utf-8"))


def generate_decorations(palette: Palette, intensity: DecorationIntensity,
                         theme: DecorationTheme = DecorationTheme.ABSTRACT) -> List[Decoration]:
    """
    Places between the intensity's min and max shapes in the page margins,
    drawn from the theme's shape set. Returns an empty list for ``none``.
    """
    low, high = COUNTS[intensity]
    if high == 0:
        return []
    rng = random.Random(palette_seed(palette))
    size_low, size_high = SIZES[intensity]
    colors = (palette.primary, palette.accent)
    names = list(THEME_SHAPES[theme])

    decorations = []
    for _ in range(rng.randint(low, high)):
        x_min, x_max, y_min, y_max = rng.choice(ZONES)
        x = min(100.0, max(0.0, rng.uniform(x_min, x_max) + rng.uniform(-5, 5)))
        y = min(100.0, max(0.0, rng.uniform(y_min, y_max) + rng.uniform(-5, 5)))
        decorations.append(Decoration(
            shape=rng.choice(names),
            size=rng.randint(size_low, size_high),
            x=x,
            y=y,
            rotation=rng.randrange(360),
            color=rng.choice(colors),
            opacity=0.08 + rng.random() * 0.12,
        ))
    rng.shuffle(decorations)
    logger.debug(f"Generated {len(decorations)} {intensity.value} {theme.value} decorations")
    return decorations


def decorations_html(palette: Palette, intensity: DecorationIntensity,
                     theme: DecorationTheme = DecorationTheme.ABSTRACT) -> str:
    """The decoration layer markup, or an empty string."""
    decorations = generate_decorations(palette, intensity, theme)
    if not decorations:
        return ""
    inner = "".join(d.to_svg() for d in decorations)
    return f'<div class="cv-decorations" aria-hidden="true">{inner}</div>'
