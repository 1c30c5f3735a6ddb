"""Theme composition.

Merge, extend, override, project and derive themes. Every operation takes
ThemeConfig instances (or interchange dictionaries for partial overlays) and
returns new records; inputs are never mutated.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from .color import mix
from .contrast import fix_theme_contrast
from .darkmode import DarkModeOptions, generate_dark_mode_colors
from .resolver import is_token_reference
from .schema import ThemeConfig, REQUIRED_COLOR_ROLES, DEFAULT_BREAKPOINTS
from .utils import deep_merge_dict, expand_dotted_keys, set_path

logger = logging.getLogger(__name__)

MERGE_STRATEGIES = ('override', 'first', 'merge')
VARIANT_TYPES = ('light', 'dark', 'high-contrast', 'low-contrast')

HIGH_CONTRAST_COLORS = {
    'text': '#000000',
    'textSecondary': '#1a1a1a',
    'textMuted': '#333333',
    'surface': '#ffffff',
    'surfaceSecondary': '#f5f5f5',
    'surfaceHover': '#eeeeee',
    'border': '#000000',
    'borderStrong': '#000000',
    'borderSubtle': '#666666',
}

LOW_CONTRAST_COLORS = {
    'text': '#404040',
    'textSecondary': '#666666',
    'textMuted': '#999999',
    'surface': '#fafafa',
    'surfaceSecondary': '#f5f5f5',
    'surfaceHover': '#eeeeee',
    'border': '#e0e0e0',
    'borderStrong': '#cccccc',
    'borderSubtle': '#f0f0f0',
}

ThemeInput = Union[ThemeConfig, Dict[str, Any]]


def _as_dict(theme: ThemeInput) -> Dict[str, Any]:
    if isinstance(theme, ThemeConfig):
        return theme.to_dict()
    return expand_dotted_keys(theme) if any('.' in str(k) for k in theme) else theme


def deep_merge(base: Dict[str, Any], overlay: Dict[str, Any],
               array_strategy: str = "replace") -> Dict[str, Any]:
    """Deep merge two theme dictionaries.

    Scalars in ``overlay`` win, dictionaries merge key by key, arrays are
    replaced wholesale unless ``array_strategy`` is ``"concat"``.
    """
    if array_strategy not in ('replace', 'concat'):
        raise ValueError(f"Unknown array strategy: {array_strategy}")
    return deep_merge_dict(base, overlay, array_strategy)


def merge_themes(base: ThemeInput, override: ThemeInput, strategy: str = "override",
                 preserve_meta: bool = False) -> ThemeConfig:
    """Merge two themes.

    Args:
        base: Base theme
        override: Theme or partial theme dictionary to merge in
        strategy: 'override' (override wins), 'first' (base wins, override
            only fills gaps) or 'merge' (override wins, arrays concatenate)
        preserve_meta: Keep the base theme's meta unchanged

    Returns:
        New merged theme

    Raises:
        ValueError: Unknown strategy, or the merge does not form a valid theme
    """
    if strategy not in MERGE_STRATEGIES:
        raise ValueError(f"Unknown merge strategy '{strategy}'; expected one of {MERGE_STRATEGIES}")

    base_data = _as_dict(base)
    override_data = _as_dict(override)

    if strategy == 'override':
        merged = deep_merge(base_data, override_data)
    elif strategy == 'first':
        merged = deep_merge(override_data, base_data)
    else:
        merged = deep_merge(base_data, override_data, array_strategy="concat")

    if preserve_meta and 'meta' in base_data:
        merged['meta'] = base_data['meta']

    return ThemeConfig.from_dict(merged)


def merge_all_themes(themes: List[ThemeInput], strategy: str = "override",
                     preserve_meta: bool = False) -> ThemeConfig:
    """Fold a list of themes left to right with ``merge_themes``."""
    if not themes:
        raise ValueError("Must provide at least one theme to merge")

    result = themes[0] if isinstance(themes[0], ThemeConfig) else ThemeConfig.from_dict(themes[0])
    for theme in themes[1:]:
        result = merge_themes(result, theme, strategy, preserve_meta)
    return result


def extend_theme(base: ThemeConfig, extension: ThemeInput) -> ThemeConfig:
    """Add ``extension`` on top of ``base``."""
    return merge_themes(base, extension, strategy="override")


def override_theme(theme: ThemeConfig, overrides: Dict[str, Any]) -> ThemeConfig:
    """Set values by dotted path, e.g. ``{"colors.primary": "#000"}``.

    Nested dictionaries are accepted as well and are deep merged.
    """
    data = theme.to_dict()
    for key, value in overrides.items():
        if '.' in key:
            data = set_path(data, key, value)
        elif isinstance(value, dict) and isinstance(data.get(key), dict):
            data = deep_merge(data, {key: value})
        else:
            data[key] = value
    return ThemeConfig.from_dict(data)


def compose_themes(base: ThemeConfig, *partials: ThemeInput) -> ThemeConfig:
    """Apply partial themes to ``base`` in order."""
    composed = base
    for partial in partials:
        composed = extend_theme(composed, partial)
    return composed


def _variant_meta(meta: Dict[str, Any], variant: str, name: Optional[str]) -> Dict[str, Any]:
    base_name = meta['name']
    for known in VARIANT_TYPES:
        suffix = f"-{known}"
        if base_name.endswith(suffix):
            base_name = base_name[:-len(suffix)]
            break
    label = variant.replace('-', ' ')
    return dict(
        meta,
        name=name or f"{base_name}-{variant}",
        description=f"{label.capitalize()} variant of {meta['name']}",
    )


def create_theme_variant(base: ThemeConfig, variant_type: str, name: Optional[str] = None,
                         options: Optional[DarkModeOptions] = None) -> ThemeConfig:
    """Derive a named sibling theme.

    Only colors (and for ``dark``, the component color mappings) change;
    typography, spacing, borders and breakpoints are shared with ``base``.

    Args:
        base: Theme to derive from
        variant_type: 'light', 'dark', 'high-contrast' or 'low-contrast'
        name: Name for the variant; defaults to ``<name>-<variant>``
        options: Dark-mode options for the ``dark`` variant

    Returns:
        New theme

    Raises:
        ValueError: Unknown variant type
    """
    if variant_type not in VARIANT_TYPES:
        raise ValueError(f"Unknown variant type '{variant_type}'; expected one of {VARIANT_TYPES}")

    data = base.to_dict()
    data['meta'] = _variant_meta(data['meta'], variant_type, name)
    dark_mode = data.pop('darkMode', None) or {}

    if variant_type == 'dark':
        dark_colors = generate_dark_mode_colors(base, options)
        dark_colors = deep_merge(dark_colors, dark_mode.get('colors') or {})
        data['colors'] = deep_merge(data['colors'], dark_colors)
        for section in ('buttons', 'cards'):
            if dark_mode.get(section):
                data[section] = deep_merge(data.get(section) or {}, dark_mode[section])

    elif variant_type == 'high-contrast':
        data['colors'] = deep_merge(data['colors'], HIGH_CONTRAST_COLORS)
        themed, _ = fix_theme_contrast(ThemeConfig.from_dict(data), level='AAA')
        data = themed.to_dict()

    elif variant_type == 'low-contrast':
        colors = deep_merge(data['colors'], LOW_CONTRAST_COLORS)
        # Primary is softened 20% toward the surface
        if not is_token_reference(colors['primary']):
            colors['primary'] = mix(colors['primary'], LOW_CONTRAST_COLORS['surface'], 0.2)
        data['colors'] = colors

    logger.debug(f"Created {variant_type} variant '{data['meta']['name']}'")
    return ThemeConfig.from_dict(data)


def create_theme_variants(base: ThemeConfig, variants: Iterable[str]) -> Dict[str, ThemeConfig]:
    """Create several variants at once, keyed by variant type."""
    return {variant: create_theme_variant(base, variant) for variant in variants}


def extract_theme(theme: ThemeConfig, sections: Iterable[str]) -> Dict[str, Any]:
    """Partial interchange dictionary holding only ``sections``."""
    data = theme.to_dict()
    return {section: data[section] for section in sections if section in data}


def _project_colors(theme: ThemeConfig, keep: Set[str], operation: str) -> ThemeConfig:
    data = theme.to_dict()
    colors = data['colors']
    for role in REQUIRED_COLOR_ROLES:
        if role not in keep and role in colors:
            logger.warning(f"Required color '{role}' cannot be removed by {operation}; keeping it")
            keep.add(role)
    data['colors'] = {role: value for role, value in colors.items() if role in keep}
    return ThemeConfig.from_dict(data)


def pick_colors(theme: ThemeConfig, roles: Iterable[str]) -> ThemeConfig:
    """Theme with only the named color roles (required roles always survive)."""
    return _project_colors(theme, set(roles), "pick_colors")


def omit_colors(theme: ThemeConfig, roles: Iterable[str]) -> ThemeConfig:
    """Theme without the named color roles (required roles always survive)."""
    omitted = set(roles)
    keep = {role for role in theme.color_map() if role not in omitted}
    return _project_colors(theme, keep, "omit_colors")


def _spacing_indices(theme: ThemeConfig) -> Set[int]:
    spacing = theme.spacing
    indices = set(spacing.values or {})
    indices.update(range(len(spacing.scale or [])))
    return indices


def are_themes_compatible(a: ThemeConfig, b: ThemeConfig) -> bool:
    """Same breakpoint key set and same spacing index set."""
    breakpoints_a = set(DEFAULT_BREAKPOINTS) | set(a.breakpoints or {})
    breakpoints_b = set(DEFAULT_BREAKPOINTS) | set(b.breakpoints or {})
    return breakpoints_a == breakpoints_b and _spacing_indices(a) == _spacing_indices(b)
