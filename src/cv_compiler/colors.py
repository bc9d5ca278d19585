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
Hex colour helpers shared by the token resolver, stylesheet and override layer.
"""

import re
from typing import Dict, List, Mapping, Tuple

from cv_compiler.errors import ConfigurationError

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

DARK_TEXT = "#1a1a1a"
LIGHT_TEXT = "#ffffff"
WHITE = "#ffffff"
FALLBACK_DARK = "#1a202c"
FALLBACK_BANNER = "#1a365d"

# Minimum contrast against white: body text and headings, then muted
# labels and accents.
TEXT_CONTRAST = 4.5
LABEL_CONTRAST = 3.0


def normalize_hex(value: str, field: str = "color") -> str:
    """
    Validates a hex colour and returns it as lowercase ``#rrggbb``.

    Raises:
        ConfigurationError: if the value is not a 3 or 6 digit hex colour.
    """
    if not isinstance(value, str):
        raise ConfigurationError(f"{field}: expected a hex colour, got {value!r}")
    match = _HEX_RE.match(value.strip())
    if not match:
        raise ConfigurationError(f"{field}: '{value}' is not a hex colour")
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    digits = normalize_hex(value)[1:]
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    def clamp(v):
        return max(0, min(255, int(round(v))))
    return "#{:02x}{:02x}{:02x}".format(clamp(r), clamp(g), clamp(b))


def luminance(value: str) -> float:
    """WCAG relative luminance, 0 (black) to 1 (white)."""
    channels = []
    for v in hex_to_rgb(value):
        v = v / 255
        channels.append(v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4)
    r, g, b = channels
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(first: str, second: str) -> float:
    lighter, darker = sorted((luminance(first), luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def contrast_text(background: str) -> str:
    """Dark text on light backgrounds, white text otherwise."""
    return DARK_TEXT if luminance(background) > 0.4 else LIGHT_TEXT


def darken(value: str, percent: float) -> str:
    r, g, b = hex_to_rgb(value)
    factor = 1 - percent / 100
    return rgb_to_hex(r * factor, g * factor, b * factor)


def lighten(value: str, percent: float) -> str:
    r, g, b = hex_to_rgb(value)
    shift = 255 * percent / 100
    return rgb_to_hex(r + shift, g + shift, b + shift)


def tint(value: str, percent: float) -> str:
    """Mixes the colour ``percent`` of the way towards white."""
    r, g, b = hex_to_rgb(value)
    factor = percent / 100
    return rgb_to_hex(r + (255 - r) * factor, g + (255 - g) * factor, b + (255 - b) * factor)


def ensure_contrast(color: str, background: str, minimum: float = TEXT_CONTRAST) -> str:
    """
    Returns ``color`` if it reaches ``minimum`` against ``background``,
    otherwise the first 10% step towards black (on light backgrounds) or
    white (on dark ones) that does.
    """
    if contrast_ratio(color, background) >= minimum:
        return color
    light_background = luminance(background) > 0.5
    for percent in range(10, 100, 10):
        adjusted = darken(color, percent) if light_background else tint(color, percent)
        if contrast_ratio(adjusted, background) >= minimum:
            return adjusted
    return FALLBACK_DARK if light_background else WHITE


def fix_palette_contrast(palette: Mapping[str, str], banner: bool) -> Tuple[Dict[str, str], List[str]]:
    """
    Adjusts palette colours that would be unreadable on the white page.

    A banner header paints ``primary`` behind white text, so there primary
    must carry white text instead of reading well on white. ``secondary``
    is a background and is tinted until it counts as light.

    Returns:
        the adjusted palette and one message per change made.
    """
    result = dict(palette)
    fixes = []

    primary = result["primary"]
    if contrast_ratio(primary, WHITE) < TEXT_CONTRAST:
        if banner:
            darker = darken(primary, 40)
            result["primary"] = darker if contrast_ratio(darker, WHITE) >= TEXT_CONTRAST else FALLBACK_BANNER
            fixes.append(f"banner background {primary} -> {result['primary']}")
        else:
            result["primary"] = ensure_contrast(primary, WHITE, TEXT_CONTRAST)
            fixes.append(f"primary {primary} -> {result['primary']}")

    for name, minimum in (("text", TEXT_CONTRAST), ("muted", LABEL_CONTRAST), ("accent", LABEL_CONTRAST)):
        before = result[name]
        if contrast_ratio(before, WHITE) < minimum:
            result[name] = ensure_contrast(before, WHITE, minimum)
            fixes.append(f"{name} {before} -> {result[name]}")

    secondary = result["secondary"]
    if luminance(secondary) <= 0.5:
        result["secondary"] = tint(secondary, 80)
        fixes.append(f"secondary {secondary} -> {result['secondary']}")

    return result, fixes
