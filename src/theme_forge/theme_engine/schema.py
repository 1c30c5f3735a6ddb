"""Theme schema definitions for the theme-forge token engine.

This module defines the Pydantic models that validate and structure all theme
data: metadata, color roles, typography, spacing, borders, breakpoints,
component-variant style mappings and dark-mode overrides.

Theme records keep their interchange key names (``surfaceSecondary``,
``baseSize``) so that token references such as ``colors.surfaceSecondary``
address the same keys that appear in theme files. Python attribute names are
snake_case and mapped to those keys through a camelCase alias generator.
"""

from typing import Dict, Any, Optional, List, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


Number = Union[int, float]

DEFAULT_BREAKPOINTS: Dict[str, int] = {
    "xs": 320,
    "sm": 640,
    "md": 768,
    "lg": 1024,
    "xl": 1280,
    "2xl": 1536,
}

REQUIRED_COLOR_ROLES = (
    "primary",
    "surface",
    "surfaceSecondary",
    "surfaceHover",
    "text",
    "textSecondary",
    "textMuted",
    "border",
    "borderStrong",
    "borderSubtle",
)

BUTTON_STYLE_KEYS = (
    "background",
    "text",
    "border",
    "backgroundHover",
    "textHover",
    "borderHover",
    "backgroundActive",
    "textActive",
    "borderActive",
)

CARD_STYLE_KEYS = (
    "background",
    "border",
    "backgroundHover",
    "borderHover",
    "borderStyle",
    "borderWidth",
)


class BorderStyle(str, Enum):
    """Border line styles"""
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class WCAGLevel(str, Enum):
    """WCAG conformance levels"""
    AA = "AA"
    AAA = "AAA"


class ContrastLevel(str, Enum):
    """Highest WCAG level met by a color pair"""
    AAA = "AAA"
    AA = "AA"
    AA_LARGE = "AA-large"
    FAIL = "fail"


class DarkModeIntensity(str, Enum):
    """How far dark surfaces are pushed toward black"""
    SUBTLE = "subtle"
    MODERATE = "moderate"
    INTENSE = "intense"


class ColorBlindnessType(str, Enum):
    """Supported color vision deficiencies"""
    PROTANOPIA = "protanopia"
    DEUTERANOPIA = "deuteranopia"
    TRITANOPIA = "tritanopia"
    PROTANOMALY = "protanomaly"
    DEUTERANOMALY = "deuteranomaly"
    TRITANOMALY = "tritanomaly"
    ACHROMATOPSIA = "achromatopsia"
    ACHROMATOMALY = "achromatomaly"


class Severity(str, Enum):
    """Issue severity"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ThemeModel(BaseModel):
    """Base model for theme sections.

    Records are immutable; composition operations produce new instances.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        frozen=True,
    )


class ThemeMeta(ThemeModel):
    """Identity metadata for a theme"""

    name: str = Field(..., description="Theme display name")
    version: str = Field("1.0.0", description="Theme version")
    description: Optional[str] = None
    author: Optional[str] = None
    tags: Optional[List[str]] = None


class ThemeColors(ThemeModel):
    """Semantic color roles.

    Extended roles (``successLight``, ``primaryDark`` ...) are kept as extra
    fields under their interchange names.
    """

    model_config = ConfigDict(extra="allow")

    # Brand
    primary: str = Field(..., description="Primary brand color")
    primary_hover: Optional[str] = None
    primary_active: Optional[str] = None
    primary_light: Optional[str] = None
    secondary: Optional[str] = None
    secondary_hover: Optional[str] = None
    secondary_active: Optional[str] = None

    # Surfaces
    surface: str = Field(..., description="Main background color")
    surface_secondary: str = Field(..., description="Secondary surface color")
    surface_hover: str = Field(..., description="Surface hover color")

    # Text
    text: str = Field(..., description="Primary text color")
    text_secondary: str = Field(..., description="Secondary text color")
    text_muted: str = Field(..., description="Muted text color")
    text_tertiary: Optional[str] = None
    text_inverted: Optional[str] = None

    # Borders
    border: str = Field(..., description="Default border color")
    border_strong: str = Field(..., description="Emphasized border color")
    border_subtle: str = Field(..., description="Subtle border color")

    # Semantic status colors
    success: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
    info: Optional[str] = None

    # Accents and interaction
    accent: Optional[str] = None
    accent_hover: Optional[str] = None
    accent_active: Optional[str] = None
    link: Optional[str] = None
    link_hover: Optional[str] = None
    link_active: Optional[str] = None
    focus: Optional[str] = None
    hover: Optional[str] = None
    overlay: Optional[str] = None
    backdrop: Optional[str] = None
    neutral: Optional[str] = None
    neutral_hover: Optional[str] = None
    neutral_active: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def strip_color_value(cls, v):
        """Trim surrounding whitespace from color values"""
        if isinstance(v, str):
            return v.strip()
        return v


class FontWeights(ThemeModel):
    """Named font weights"""
    regular: int = 400
    medium: int = 500
    semibold: int = 600
    bold: int = 700


class LineHeights(ThemeModel):
    """Named line heights"""
    tight: Number = 1.2
    snug: Number = 1.375
    normal: Number = 1.5
    relaxed: Number = 1.75


class Typography(ThemeModel):
    """Typography configuration"""

    font_family: str = Field(..., description="Body font stack")
    font_family_heading: Optional[str] = None
    font_family_mono: Optional[str] = None
    base_size: Number = Field(16, description="Base font size in px")
    scale: Number = Field(1.25, description="Type scale ratio")
    sizes: Optional[Dict[str, Number]] = None
    weights: FontWeights = Field(default_factory=FontWeights)
    line_heights: LineHeights = Field(default_factory=LineHeights)

    @model_validator(mode='before')
    @classmethod
    def resolve_aliases(cls, data: Any) -> Any:
        """Map the deprecated ``fontSize`` key onto ``baseSize``."""
        if isinstance(data, dict) and 'fontSize' in data:
            data = dict(data)
            alias_value = data.pop('fontSize')
            if 'baseSize' not in data and 'base_size' not in data:
                data['baseSize'] = alias_value
        return data


class Spacing(ThemeModel):
    """Spacing configuration"""

    base_unit: Number = Field(4, description="Base spacing unit in px")
    scale: Optional[List[Number]] = None
    values: Optional[Dict[int, Number]] = None

    @model_validator(mode='before')
    @classmethod
    def resolve_aliases(cls, data: Any) -> Any:
        """Map the deprecated ``unit`` key onto ``baseUnit``."""
        if isinstance(data, dict) and 'unit' in data:
            data = dict(data)
            alias_value = data.pop('unit')
            if 'baseUnit' not in data and 'base_unit' not in data:
                data['baseUnit'] = alias_value
        return data


class Borders(ThemeModel):
    """Border widths, radii and default style"""

    thin: Number = 1
    default: Number = 2
    thick: Number = 4
    radius_subtle: Number = 8
    radius_relaxed: Number = 12
    radius_pill: Number = 9999
    radius_liquid: Optional[Number] = None
    default_style: BorderStyle = BorderStyle.SOLID.value

    @model_validator(mode='before')
    @classmethod
    def resolve_aliases(cls, data: Any) -> Any:
        """Map ``width``/``style`` onto ``default``/``defaultStyle``.

        The canonical key wins when both are present.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        aliases = (('width', 'default'), ('style', 'defaultStyle'))
        for alias, canonical in aliases:
            if alias in data:
                alias_value = data.pop(alias)
                if canonical not in data:
                    data[canonical] = alias_value
        return data


class ButtonStyle(ThemeModel):
    """Style mapping for one button variant; values are literals or references"""

    background: Optional[str] = None
    text: Optional[str] = None
    border: Optional[str] = None
    background_hover: Optional[str] = None
    text_hover: Optional[str] = None
    border_hover: Optional[str] = None
    background_active: Optional[str] = None
    text_active: Optional[str] = None
    border_active: Optional[str] = None


class CardStyle(ThemeModel):
    """Style mapping for one card variant"""

    background: Optional[str] = None
    border: Optional[str] = None
    background_hover: Optional[str] = None
    border_hover: Optional[str] = None
    border_style: Optional[BorderStyle] = None
    border_width: Optional[Union[Number, str]] = None


class DarkModeConfig(ThemeModel):
    """Dark-mode overrides, deep-merged onto the light record"""

    enabled: bool = False
    colors: Optional[Dict[str, str]] = None
    buttons: Optional[Dict[str, ButtonStyle]] = None
    cards: Optional[Dict[str, CardStyle]] = None


class ThemeConfig(ThemeModel):
    """The canonical theme record."""

    meta: ThemeMeta
    colors: ThemeColors
    typography: Typography
    spacing: Spacing = Field(default_factory=Spacing)
    borders: Borders = Field(default_factory=Borders)
    breakpoints: Optional[Dict[str, Number]] = None
    buttons: Optional[Dict[str, ButtonStyle]] = None
    cards: Optional[Dict[str, CardStyle]] = None
    dark_mode: Optional[DarkModeConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThemeConfig':
        """Build a theme from its interchange dictionary."""
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Return the interchange dictionary (camelCase keys, no unset optionals)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def name(self) -> str:
        return self.meta.name

    @property
    def slug(self) -> str:
        """File-name friendly version of the theme name."""
        return "-".join(self.meta.name.lower().split())

    def color_map(self) -> Dict[str, str]:
        """All color roles, including extended ones, keyed by interchange name."""
        return self.colors.model_dump(by_alias=True, exclude_none=True)

    @property
    def dark_mode_enabled(self) -> bool:
        return bool(self.dark_mode and self.dark_mode.enabled)


class DerivedValues(BaseModel):
    """Secondary quantities computed once from a theme's primaries."""

    model_config = ConfigDict(frozen=True)

    font_sizes: Dict[str, Number]
    spacing: Dict[int, Number]
    border_widths: Dict[str, Number]
    radii: Dict[str, Number]
    breakpoints: Dict[str, Number]


class CompiledTheme(BaseModel):
    """A sanitized, fully resolved theme ready for the generators."""

    model_config = ConfigDict(frozen=True)

    theme: ThemeConfig = Field(..., description="Sanitized source theme")
    resolved: Dict[str, Any] = Field(..., description="Literal-valued interchange dict")
    dark_colors: Dict[str, str] = Field(default_factory=dict)
    dark_buttons: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    dark_cards: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    derived: DerivedValues

    @property
    def meta(self) -> Dict[str, Any]:
        return self.resolved["meta"]

    @property
    def colors(self) -> Dict[str, str]:
        return self.resolved["colors"]

    @property
    def typography(self) -> Dict[str, Any]:
        return self.resolved["typography"]

    @property
    def borders(self) -> Dict[str, Any]:
        return self.resolved["borders"]

    @property
    def buttons(self) -> Dict[str, Dict[str, Any]]:
        return self.resolved.get("buttons", {})

    @property
    def cards(self) -> Dict[str, Dict[str, Any]]:
        return self.resolved.get("cards", {})

    @property
    def dark_mode_enabled(self) -> bool:
        return self.theme.dark_mode_enabled

    @property
    def slug(self) -> str:
        return self.theme.slug
