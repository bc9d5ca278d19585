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
Token resolver.

Expands a compact style descriptor (theme, font pairing, scale, spacing,
palette, decoration intensity) into fully populated StyleTokens. Every enum
value goes through a fixed lookup table; an unknown value raises
ConfigurationError instead of falling back to a default.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from cv_compiler.colors import fix_palette_contrast, normalize_hex
from cv_compiler.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ThemeBase(str, Enum):
    PROFESSIONAL = "professional"
    MODERN = "modern"
    CREATIVE = "creative"
    MINIMAL = "minimal"
    BOLD = "bold"


class FontPairing(str, Enum):
    INTER_INTER = "inter-inter"
    PLAYFAIR_INTER = "playfair-inter"
    MONTSERRAT_OPEN_SANS = "montserrat-open-sans"
    RALEWAY_LATO = "raleway-lato"
    POPPINS_NUNITO = "poppins-nunito"
    ROBOTO_ROBOTO = "roboto-roboto"
    LATO_LATO = "lato-lato"
    MERRIWEATHER_SOURCE_SANS = "merriweather-source-sans"
    OSWALD_SOURCE_SANS = "oswald-source-sans"
    DM_SERIF_DM_SANS = "dm-serif-dm-sans"
    SPACE_GROTESK_WORK_SANS = "space-grotesk-work-sans"
    LIBRE_BASKERVILLE_SOURCE_SANS = "libre-baskerville-source-sans"


class TypeScale(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class SpacingScale(str, Enum):
    COMPACT = "compact"
    COMFORTABLE = "comfortable"
    SPACIOUS = "spacious"


class HeaderVariant(str, Enum):
    SIMPLE = "simple"
    ACCENTED = "accented"
    BANNER = "banner"
    SPLIT = "split"


class SectionStyle(str, Enum):
    CLEAN = "clean"
    UNDERLINED = "underlined"
    BOXED = "boxed"
    TIMELINE = "timeline"
    ACCENT_LEFT = "accent-left"
    CARD = "card"


class SkillsDisplay(str, Enum):
    TAGS = "tags"
    LIST = "list"
    COMPACT = "compact"


class DecorationIntensity(str, Enum):
    NONE = "none"
    MINIMAL = "minimal"
    MODERATE = "moderate"
    ABUNDANT = "abundant"


class DecorationTheme(str, Enum):
    GEOMETRIC = "geometric"
    ORGANIC = "organic"
    MINIMAL = "minimal"
    TECH = "tech"
    CREATIVE = "creative"
    ABSTRACT = "abstract"


class ContactLayout(str, Enum):
    SINGLE_ROW = "single-row"
    DOUBLE_ROW = "double-row"
    SINGLE_COLUMN = "single-column"
    DOUBLE_COLUMN = "double-column"


class HeaderGradient(str, Enum):
    NONE = "none"
    SUBTLE = "subtle"
    RADIAL = "radial"


class LayoutStructure(str, Enum):
    SINGLE_COLUMN = "single-column"
    SIDEBAR_LEFT = "sidebar-left"
    SIDEBAR_RIGHT = "sidebar-right"


class ExperienceFormat(str, Enum):
    BULLETS = "bullets"
    PARAGRAPH = "paragraph"


class SectionKind(str, Enum):
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    LANGUAGES = "languages"
    CERTIFICATIONS = "certifications"


class CustomCSSZone(str, Enum):
    HEADER = "header"
    ITEM = "item"
    SECTION = "section"
    SKILLS = "skills"
    NAME = "name"
    HEADLINE = "headline"
    SECTION_TITLE = "section-title"
    ITEM_TITLE = "item-title"
    ITEM_SUBTITLE = "item-subtitle"
    SUMMARY = "summary"
    HIGHLIGHTS = "highlights"
    SKILL_TAG = "skill-tag"
    AVATAR = "avatar"
    DIVIDER = "divider"


# Sections not named in a descriptor's order are appended in this order.
FALLBACK_SECTION_ORDER: Tuple[SectionKind, ...] = tuple(SectionKind)


@dataclass(frozen=True)
class FontFace:
    family: str
    url: str = ""


@dataclass(frozen=True)
class FontPairingConfig:
    heading: FontFace
    body: FontFace


@dataclass(frozen=True)
class TypeScaleConfig:
    name: float
    heading: float
    subheading: float
    body: float
    small: float
    line_height: float


@dataclass(frozen=True)
class SpacingConfig:
    section: str
    item: str
    element: str
    page_margin: str


@dataclass(frozen=True)
class Palette:
    primary: str
    secondary: str
    accent: str
    text: str
    muted: str


@dataclass(frozen=True)
class ThemeDefaults:
    font_pairing: FontPairing
    header_variant: HeaderVariant
    section_style: SectionStyle
    skills_display: SkillsDisplay
    rounded_corners: bool
    palette: Palette


def _gf(family: str, weights: str) -> str:
    return f"https://fonts.googleapis.com/css2?family={family}:wght@{weights}&display=swap"


FONT_PAIRINGS: Dict[FontPairing, FontPairingConfig] = {
    FontPairing.INTER_INTER: FontPairingConfig(
        FontFace("'Inter', sans-serif", _gf("Inter", "400;500;600;700")),
        FontFace("'Inter', sans-serif")),
    FontPairing.PLAYFAIR_INTER: FontPairingConfig(
        FontFace("'Playfair Display', serif", _gf("Playfair+Display", "400;600;700")),
        FontFace("'Inter', sans-serif", _gf("Inter", "400;500"))),
    FontPairing.MONTSERRAT_OPEN_SANS: FontPairingConfig(
        FontFace("'Montserrat', sans-serif", _gf("Montserrat", "500;600;700")),
        FontFace("'Open Sans', sans-serif", _gf("Open+Sans", "400;600"))),
    FontPairing.RALEWAY_LATO: FontPairingConfig(
        FontFace("'Raleway', sans-serif", _gf("Raleway", "500;600;700")),
        FontFace("'Lato', sans-serif", _gf("Lato", "400;700"))),
    FontPairing.POPPINS_NUNITO: FontPairingConfig(
        FontFace("'Poppins', sans-serif", _gf("Poppins", "500;600;700")),
        FontFace("'Nunito', sans-serif", _gf("Nunito", "400;600"))),
    FontPairing.ROBOTO_ROBOTO: FontPairingConfig(
        FontFace("'Roboto', sans-serif", _gf("Roboto", "400;500;700")),
        FontFace("'Roboto', sans-serif")),
    FontPairing.LATO_LATO: FontPairingConfig(
        FontFace("'Lato', sans-serif", _gf("Lato", "400;700;900")),
        FontFace("'Lato', sans-serif")),
    FontPairing.MERRIWEATHER_SOURCE_SANS: FontPairingConfig(
        FontFace("'Merriweather', serif", _gf("Merriweather", "400;700")),
        FontFace("'Source Sans 3', sans-serif", _gf("Source+Sans+3", "400;600"))),
    FontPairing.OSWALD_SOURCE_SANS: FontPairingConfig(
        FontFace("'Oswald', sans-serif", _gf("Oswald", "400;500;600;700")),
        FontFace("'Source Sans 3', sans-serif", _gf("Source+Sans+3", "400;600"))),
    FontPairing.DM_SERIF_DM_SANS: FontPairingConfig(
        FontFace("'DM Serif Display', serif",
                 "https://fonts.googleapis.com/css2?family=DM+Serif+Display&display=swap"),
        FontFace("'DM Sans', sans-serif", _gf("DM+Sans", "400;500;700"))),
    FontPairing.SPACE_GROTESK_WORK_SANS: FontPairingConfig(
        FontFace("'Space Grotesk', sans-serif", _gf("Space+Grotesk", "400;500;600;700")),
        FontFace("'Work Sans', sans-serif", _gf("Work+Sans", "400;500;600"))),
    FontPairing.LIBRE_BASKERVILLE_SOURCE_SANS: FontPairingConfig(
        FontFace("'Libre Baskerville', serif", _gf("Libre+Baskerville", "400;700")),
        FontFace("'Source Sans 3', sans-serif", _gf("Source+Sans+3", "400;600"))),
}

TYPE_SCALES: Dict[TypeScale, TypeScaleConfig] = {
    TypeScale.SMALL: TypeScaleConfig(name=24, heading=11, subheading=10, body=9, small=8, line_height=1.4),
    TypeScale.MEDIUM: TypeScaleConfig(name=28, heading=13, subheading=11, body=10, small=9, line_height=1.5),
    TypeScale.LARGE: TypeScaleConfig(name=32, heading=14, subheading=12, body=11, small=10, line_height=1.6),
}

SPACING_SCALES: Dict[SpacingScale, SpacingConfig] = {
    SpacingScale.COMPACT: SpacingConfig(section="16px", item="10px", element="4px", page_margin="15mm"),
    SpacingScale.COMFORTABLE: SpacingConfig(section="20px", item="12px", element="6px", page_margin="20mm"),
    SpacingScale.SPACIOUS: SpacingConfig(section="28px", item="16px", element="8px", page_margin="25mm"),
}

THEME_DEFAULTS: Dict[ThemeBase, ThemeDefaults] = {
    ThemeBase.PROFESSIONAL: ThemeDefaults(
        FontPairing.INTER_INTER, HeaderVariant.SIMPLE, SectionStyle.UNDERLINED, SkillsDisplay.TAGS, True,
        Palette(primary="#1a365d", secondary="#f7fafc", accent="#2b6cb0", text="#2d3748", muted="#718096")),
    ThemeBase.MODERN: ThemeDefaults(
        FontPairing.MONTSERRAT_OPEN_SANS, HeaderVariant.ACCENTED, SectionStyle.CLEAN, SkillsDisplay.TAGS, True,
        Palette(primary="#111827", secondary="#f3f4f6", accent="#6366f1", text="#374151", muted="#6b7280")),
    ThemeBase.CREATIVE: ThemeDefaults(
        FontPairing.POPPINS_NUNITO, HeaderVariant.BANNER, SectionStyle.BOXED, SkillsDisplay.TAGS, True,
        Palette(primary="#7c3aed", secondary="#faf5ff", accent="#ec4899", text="#1f2937", muted="#6b7280")),
    ThemeBase.MINIMAL: ThemeDefaults(
        FontPairing.LATO_LATO, HeaderVariant.SIMPLE, SectionStyle.CLEAN, SkillsDisplay.COMPACT, False,
        Palette(primary="#000000", secondary="#ffffff", accent="#000000", text="#333333", muted="#888888")),
    ThemeBase.BOLD: ThemeDefaults(
        FontPairing.RALEWAY_LATO, HeaderVariant.BANNER, SectionStyle.TIMELINE, SkillsDisplay.LIST, True,
        Palette(primary="#dc2626", secondary="#fef2f2", accent="#f97316", text="#1f2937", muted="#6b7280")),
}

# Gradient a banner header gets when the descriptor does not name one. Other
# header variants have no background to shade.
BANNER_GRADIENTS: Dict[ThemeBase, HeaderGradient] = {
    ThemeBase.PROFESSIONAL: HeaderGradient.NONE,
    ThemeBase.MODERN: HeaderGradient.NONE,
    ThemeBase.CREATIVE: HeaderGradient.SUBTLE,
    ThemeBase.MINIMAL: HeaderGradient.NONE,
    ThemeBase.BOLD: HeaderGradient.RADIAL,
}


def ensure_exhaustive(table: Mapping[Any, Any], enum_type: Type[Enum], name: str) -> None:
    """
    Raises at import time when a lookup table misses a member of its enum, so
    adding a variant without handling it fails loudly instead of at render time.
    """
    missing = [member.value for member in enum_type if member not in table]
    if missing:
        raise ConfigurationError(f"{name} has no entry for: {', '.join(missing)}")


ensure_exhaustive(FONT_PAIRINGS, FontPairing, "FONT_PAIRINGS")
ensure_exhaustive(TYPE_SCALES, TypeScale, "TYPE_SCALES")
ensure_exhaustive(SPACING_SCALES, SpacingScale, "SPACING_SCALES")
ensure_exhaustive(THEME_DEFAULTS, ThemeBase, "THEME_DEFAULTS")
ensure_exhaustive(BANNER_GRADIENTS, ThemeBase, "BANNER_GRADIENTS")


E = TypeVar("E", bound=Enum)


def parse_enum(enum_type: Type[E], value: Any, field_name: str) -> E:
    """Maps a raw descriptor value onto its enum, or raises ConfigurationError."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"{field_name}: unknown value {value!r} (expected one of: {allowed})") from None


def parse_flag(value: Any, field_name: str) -> bool:
    """Accepts only real booleans; 'false' or 0 raise instead of being coerced."""
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name}: expected true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class StyleDescriptor:
    """
    Compact style description, as authored by the style generator or derived
    from a template. Optional fields left as None take the theme's defaults.
    """
    theme: ThemeBase = ThemeBase.PROFESSIONAL
    font_pairing: Optional[FontPairing] = None
    scale: TypeScale = TypeScale.MEDIUM
    spacing: SpacingScale = SpacingScale.COMFORTABLE
    colors: Optional[Palette] = None
    header_variant: Optional[HeaderVariant] = None
    section_style: Optional[SectionStyle] = None
    skills_display: Optional[SkillsDisplay] = None
    decorations: DecorationIntensity = DecorationIntensity.NONE
    layout: LayoutStructure = LayoutStructure.SINGLE_COLUMN
    experience_format: ExperienceFormat = ExperienceFormat.BULLETS
    section_order: Tuple[Any, ...] = ()
    show_photo: bool = False
    rounded_corners: Optional[bool] = None
    contact_layout: Optional[ContactLayout] = None
    header_gradient: Optional[HeaderGradient] = None
    header_full_bleed: Optional[bool] = None
    use_icons: bool = False
    decoration_theme: DecorationTheme = DecorationTheme.ABSTRACT
    fix_contrast: bool = True
    custom_css: Mapping[Any, str] = field(default_factory=dict)
    style_name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StyleDescriptor":
        """
        Reads the camelCase JSON descriptor. Enum values are validated here;
        anything unknown raises ConfigurationError.
        """
        def optional(enum_type, key):
            value = data.get(key)
            return None if value is None else parse_enum(enum_type, value, key)

        def flag(key, default=None):
            value = data.get(key)
            return default if value is None else parse_flag(value, key)

        colors = data.get("colors")
        palette = None
        if colors is not None:
            if not isinstance(colors, Mapping):
                raise ConfigurationError(f"colors: expected an object, got {type(colors).__name__}")
            missing = [k for k in ("primary", "secondary", "accent", "text", "muted") if not colors.get(k)]
            if missing:
                raise ConfigurationError(f"colors: missing {', '.join(missing)}")
            palette = Palette(**{k: normalize_hex(colors[k], f"colors.{k}")
                                 for k in ("primary", "secondary", "accent", "text", "muted")})

        custom_css = data.get("customCSS") or {}
        if not isinstance(custom_css, Mapping):
            raise ConfigurationError("customCSS: expected an object of zone -> css")

        return cls(
            theme=parse_enum(ThemeBase, data.get("themeBase", ThemeBase.PROFESSIONAL.value), "themeBase"),
            font_pairing=optional(FontPairing, "fontPairing"),
            scale=parse_enum(TypeScale, data.get("scale", TypeScale.MEDIUM.value), "scale"),
            spacing=parse_enum(SpacingScale, data.get("spacing", SpacingScale.COMFORTABLE.value), "spacing"),
            colors=palette,
            header_variant=optional(HeaderVariant, "headerVariant"),
            section_style=optional(SectionStyle, "sectionStyle"),
            skills_display=optional(SkillsDisplay, "skillsDisplay"),
            decorations=parse_enum(
                DecorationIntensity, data.get("decorations", DecorationIntensity.NONE.value), "decorations"),
            layout=parse_enum(LayoutStructure, data.get("layout", LayoutStructure.SINGLE_COLUMN.value), "layout"),
            experience_format=parse_enum(
                ExperienceFormat,
                data.get("experienceDescriptionFormat", ExperienceFormat.BULLETS.value),
                "experienceDescriptionFormat"),
            section_order=tuple(data.get("sectionOrder") or ()),
            show_photo=flag("showPhoto", False),
            rounded_corners=flag("roundedCorners"),
            contact_layout=optional(ContactLayout, "contactLayout"),
            header_gradient=optional(HeaderGradient, "headerGradient"),
            header_full_bleed=flag("headerFullBleed"),
            use_icons=flag("useIcons", False),
            decoration_theme=parse_enum(
                DecorationTheme, data.get("decorationTheme", DecorationTheme.ABSTRACT.value), "decorationTheme"),
            fix_contrast=flag("fixContrast", True),
            custom_css=dict(custom_css),
            style_name=str(data.get("styleName") or ""),
        )


@dataclass(frozen=True)
class Typography:
    font_pairing: FontPairing
    heading_font: FontFace
    body_font: FontFace
    name_size: float
    heading_size: float
    body_size: float
    small_size: float
    line_height: float


@dataclass(frozen=True)
class LayoutTokens:
    structure: LayoutStructure
    header_variant: HeaderVariant
    section_style: SectionStyle
    section_order: Tuple[SectionKind, ...]
    spacing_scale: SpacingScale
    spacing: SpacingConfig
    skills_display: SkillsDisplay
    show_photo: bool
    experience_format: ExperienceFormat
    rounded_corners: bool
    contact_layout: ContactLayout
    header_gradient: HeaderGradient
    header_full_bleed: bool
    use_icons: bool


@dataclass(frozen=True)
class StyleTokens:
    """Fully resolved visual configuration. No field is ever None."""
    palette: Palette
    typography: Typography
    layout: LayoutTokens
    decorations: DecorationIntensity
    decoration_theme: DecorationTheme
    custom_css: Tuple[Tuple[CustomCSSZone, str], ...]
    theme: ThemeBase
    scale: TypeScale
    style_name: str

    def css_for(self, zone: CustomCSSZone) -> str:
        for key, value in self.custom_css:
            if key is zone:
                return value
        return ""

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view, used by the CLI's resolve command."""
        return {
            "styleName": self.style_name,
            "theme": self.theme.value,
            "scale": self.scale.value,
            "palette": vars(self.palette).copy(),
            "typography": {
                "fontPairing": self.typography.font_pairing.value,
                "headingFont": self.typography.heading_font.family,
                "bodyFont": self.typography.body_font.family,
                "nameSizePt": self.typography.name_size,
                "headingSizePt": self.typography.heading_size,
                "bodySizePt": self.typography.body_size,
                "lineHeight": self.typography.line_height,
            },
            "layout": {
                "structure": self.layout.structure.value,
                "headerVariant": self.layout.header_variant.value,
                "sectionStyle": self.layout.section_style.value,
                "sectionOrder": [kind.value for kind in self.layout.section_order],
                "spacing": self.layout.spacing_scale.value,
                "skillsDisplay": self.layout.skills_display.value,
                "showPhoto": self.layout.show_photo,
                "experienceFormat": self.layout.experience_format.value,
                "roundedCorners": self.layout.rounded_corners,
                "contactLayout": self.layout.contact_layout.value,
                "headerGradient": self.layout.header_gradient.value,
                "headerFullBleed": self.layout.header_full_bleed,
                "useIcons": self.layout.use_icons,
            },
            "decorations": self.decorations.value,
            "decorationTheme": self.decoration_theme.value,
            "customCSS": {zone.value: css for zone, css in self.custom_css},
        }


_CSS_UNSAFE = re.compile(r"[<>{}]|/\*|\*/")


def sanitize_css(value: Any, zone: str) -> str:
    """
    Strips characters that would let a zone string escape its rule or the
    style element, and comment delimiters that would swallow later rules.
    """
    if not isinstance(value, str):
        raise ConfigurationError(f"customCSS.{zone}: expected a string")
    # Removing one token can join its neighbours into another.
    cleaned = _CSS_UNSAFE.sub("", value)
    while _CSS_UNSAFE.search(cleaned):
        cleaned = _CSS_UNSAFE.sub("", cleaned)
    return cleaned.strip()


def resolve_section_order(requested) -> Tuple[SectionKind, ...]:
    """
    Validates the requested order, drops duplicates and appends any kind not
    named in the fixed fallback order.
    """
    order = []
    for raw in requested:
        kind = parse_enum(SectionKind, raw, "sectionOrder")
        if kind not in order:
            order.append(kind)
    for kind in FALLBACK_SECTION_ORDER:
        if kind not in order:
            order.append(kind)
    return tuple(order)


def resolve_tokens(descriptor: Union[StyleDescriptor, Mapping[str, Any]]) -> StyleTokens:
    """
    Expands a style descriptor into StyleTokens.

    Args:
        descriptor: a StyleDescriptor or its JSON mapping.

    Returns:
        StyleTokens: with every enum resolved through the lookup tables.

    Raises:
        ConfigurationError: for any unknown enum value, colour or CSS zone.
    """
    if not isinstance(descriptor, StyleDescriptor):
        if not isinstance(descriptor, Mapping):
            raise ConfigurationError(f"style descriptor must be an object, got {type(descriptor).__name__}")
        descriptor = StyleDescriptor.from_dict(descriptor)

    theme = parse_enum(ThemeBase, descriptor.theme, "themeBase")
    defaults = THEME_DEFAULTS[theme]

    pairing = parse_enum(FontPairing, descriptor.font_pairing or defaults.font_pairing, "fontPairing")
    scale = parse_enum(TypeScale, descriptor.scale, "scale")
    spacing = parse_enum(SpacingScale, descriptor.spacing, "spacing")
    fonts = FONT_PAIRINGS[pairing]
    sizes = TYPE_SCALES[scale]

    header_variant = parse_enum(HeaderVariant, descriptor.header_variant or defaults.header_variant, "headerVariant")
    banner = header_variant is HeaderVariant.BANNER

    palette = descriptor.colors or defaults.palette
    palette = {name: normalize_hex(value, f"colors.{name}") for name, value in vars(palette).items()}
    if descriptor.fix_contrast:
        palette, fixes = fix_palette_contrast(palette, banner)
        for fix in fixes:
            logger.info(f"Colour contrast: {fix}")
    palette = Palette(**palette)

    custom_css = []
    for raw_zone, css in sorted(descriptor.custom_css.items(), key=lambda kv: str(getattr(kv[0], "value", kv[0]))):
        zone = parse_enum(CustomCSSZone, raw_zone, "customCSS")
        cleaned = sanitize_css(css, zone.value)
        if cleaned:
            custom_css.append((zone, cleaned))

    rounded = defaults.rounded_corners if descriptor.rounded_corners is None else bool(descriptor.rounded_corners)
    if descriptor.contact_layout is not None:
        contact_layout = parse_enum(ContactLayout, descriptor.contact_layout, "contactLayout")
    elif header_variant is HeaderVariant.SPLIT:
        contact_layout = ContactLayout.SINGLE_COLUMN
    else:
        contact_layout = ContactLayout.SINGLE_ROW
    if descriptor.header_gradient is not None:
        gradient = parse_enum(HeaderGradient, descriptor.header_gradient, "headerGradient")
    else:
        gradient = BANNER_GRADIENTS[theme] if banner else HeaderGradient.NONE
    if descriptor.header_full_bleed is None:
        full_bleed = banner and theme is not ThemeBase.PROFESSIONAL
    else:
        full_bleed = bool(descriptor.header_full_bleed)

    tokens = StyleTokens(
        palette=palette,
        typography=Typography(
            font_pairing=pairing,
            heading_font=fonts.heading,
            body_font=fonts.body,
            name_size=sizes.name,
            heading_size=sizes.heading,
            body_size=sizes.body,
            small_size=sizes.small,
            line_height=sizes.line_height,
        ),
        layout=LayoutTokens(
            structure=parse_enum(LayoutStructure, descriptor.layout, "layout"),
            header_variant=header_variant,
            section_style=parse_enum(
                SectionStyle, descriptor.section_style or defaults.section_style, "sectionStyle"),
            section_order=resolve_section_order(descriptor.section_order),
            spacing_scale=spacing,
            spacing=SPACING_SCALES[spacing],
            skills_display=parse_enum(
                SkillsDisplay, descriptor.skills_display or defaults.skills_display, "skillsDisplay"),
            show_photo=bool(descriptor.show_photo),
            experience_format=parse_enum(
                ExperienceFormat, descriptor.experience_format, "experienceDescriptionFormat"),
            rounded_corners=rounded,
            contact_layout=contact_layout,
            header_gradient=gradient,
            header_full_bleed=full_bleed,
            use_icons=bool(descriptor.use_icons),
        ),
        decorations=parse_enum(DecorationIntensity, descriptor.decorations, "decorations"),
        decoration_theme=parse_enum(DecorationTheme, descriptor.decoration_theme, "decorationTheme"),
        custom_css=tuple(custom_css),
        theme=theme,
        scale=scale,
        style_name=descriptor.style_name or f"{theme.value.title()} {scale.value}",
    )
    logger.debug(f"Resolved tokens: theme={theme.value} fonts={pairing.value} scale={scale.value} "
                 f"spacing={spacing.value} header={tokens.layout.header_variant.value}")
    return tokens


def default_descriptor() -> StyleDescriptor:
    """Fallback style used when no generated style exists yet."""
    return StyleDescriptor(
        theme=ThemeBase.PROFESSIONAL,
        scale=TypeScale.MEDIUM,
        spacing=SpacingScale.COMFORTABLE,
        decorations=DecorationIntensity.NONE,
        style_name="Professional Modern",
    )
