"""Core theme engine for theme-forge.

This module provides the ThemeEngine class that loads themes from the
registry or from files, applies variants and overrides, compiles them into
the literal-valued form the generators consume, and writes generated files.
Compiled themes are cached per theme content.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .audit import AuditResult, audit_theme_accessibility
from .compiler import compile_theme
from .composition import create_theme_variant, override_theme
from .darkmode import DarkModeOptions, generate_dark_mode
from .errors import ThemeForgeError
from .registry import ThemeRegistry, load_theme_file
from .schema import CompiledTheme, DarkModeIntensity, ThemeConfig
from .validation import ValidationIssue, validate_theme

logger = logging.getLogger(__name__)

ThemeSource = Union[str, Path, ThemeConfig, Dict[str, Any]]


class ThemeEngine:
    """Load, compile and generate themes."""

    def __init__(self, config=None):
        """Initialize the theme engine.

        Args:
            config: Optional ForgeConfig; the global configuration is used
                when omitted
        """
        if config is None:
            from ..config import get_config
            config = get_config()
        self.config = config
        self.registry = ThemeRegistry(Path(config.themes_dir))

        # theme_key -> loaded theme, content hash -> compiled theme
        self._theme_cache: Dict[str, ThemeConfig] = {}
        self._compiled_cache: Dict[str, CompiledTheme] = {}

        logger.debug(f"ThemeEngine initialized with themes dir: {config.themes_dir}")

    @classmethod
    def from_config(cls, config) -> 'ThemeEngine':
        """Create theme engine from application config."""
        return cls(config)

    def load_theme(self, name_or_path: Union[str, Path], variant: Optional[str] = None,
                   overrides: Optional[Dict[str, Any]] = None) -> ThemeConfig:
        """Load a theme by registry name or file path.

        Args:
            name_or_path: Preset/user theme name, or a YAML/JSON file path
            variant: Optional variant ('light', 'dark', 'high-contrast', 'low-contrast')
            overrides: Optional overrides; dotted paths allowed

        Returns:
            ThemeConfig instance

        Raises:
            ValueError: If theme cannot be loaded
        """
        theme_name = str(name_or_path)
        cache_key = self._generate_cache_key(theme_name, variant, overrides)
        if cache_key in self._theme_cache:
            return self._theme_cache[cache_key]

        try:
            theme = self._load_base_theme(theme_name)

            if variant:
                theme = create_theme_variant(theme, variant, options=self._dark_mode_options())
            if overrides:
                theme = override_theme(theme, overrides)

        except (ValueError, OSError, ThemeForgeError) as e:
            logger.error(f"Error loading theme '{theme_name}': {e}")
            raise ValueError(f"Failed to load theme '{theme_name}': {e}")

        self._theme_cache[cache_key] = theme
        logger.debug(f"Loaded theme '{theme_name}' with variant '{variant}'")
        return theme

    def _load_base_theme(self, theme_name: str) -> ThemeConfig:
        if self.registry.theme_exists(theme_name):
            return self.registry.load_theme(theme_name)

        path = Path(theme_name).expanduser()
        if path.is_file():
            data = load_theme_file(path)
            data = self.registry.resolve_inheritance(data, path.stem)
            return ThemeConfig.from_dict(data)

        raise FileNotFoundError(f"Theme '{theme_name}' not found")

    def resolve(self, theme: ThemeSource) -> ThemeConfig:
        """Accept a theme in any supported form and return a ThemeConfig."""
        if isinstance(theme, ThemeConfig):
            return theme
        if isinstance(theme, dict):
            try:
                return ThemeConfig.from_dict(theme)
            except ValueError as e:
                raise ValueError(f"Invalid theme definition: {e}")
        return self.load_theme(theme)

    def compile(self, theme: ThemeSource, strict: Optional[bool] = None) -> CompiledTheme:
        """Sanitize, resolve and derive a theme once.

        Args:
            theme: Theme name, path, ThemeConfig or interchange dict
            strict: Raise on unresolvable references; defaults to
                ``config.strict_resolution``

        Returns:
            CompiledTheme instance
        """
        if strict is None:
            strict = self.config.strict_resolution
        if isinstance(theme, dict):
            # Raw records may be invalid before sanitization
            record = theme
        else:
            record = self.resolve(theme).to_dict()

        cache_key = f"{int(strict)}_{json.dumps(record, sort_keys=True, default=str)}"
        if cache_key in self._compiled_cache:
            return self._compiled_cache[cache_key]

        compiled = compile_theme(record, strict=strict)
        self._compiled_cache[cache_key] = compiled
        return compiled

    def generate(self, theme: ThemeSource, format_id: str) -> str:
        """Generate one output format for a theme.

        Raises:
            ValueError: Unknown format or unloadable theme
        """
        from ..generators import generate

        return generate(self.compile(theme), format_id, css_scope=self.config.css_scope)

    def generate_all(self, theme: ThemeSource, formats: Optional[Iterable[str]] = None) -> List[Any]:
        """Generate several formats; all formats when ``formats`` is None.

        Returns:
            List of GeneratorOutput in registry order
        """
        from ..generators import generate_all_formats

        return generate_all_formats(
            self.compile(theme),
            formats=list(formats) if formats is not None else None,
            max_workers=self.config.max_workers,
            css_scope=self.config.css_scope,
        )

    def write_outputs(self, outputs: List[Any], out_dir: Optional[Union[str, Path]] = None) -> List[Path]:
        """Write generated outputs to disk.

        Args:
            outputs: GeneratorOutput list
            out_dir: Target directory; defaults to ``config.output_dir``

        Returns:
            Paths of the written files

        Raises:
            ValueError: If a file cannot be written
        """
        target = Path(out_dir) if out_dir else self.config.get_output_path()
        written: List[Path] = []
        try:
            target.mkdir(parents=True, exist_ok=True)
            for output in outputs:
                path = target / output.filename
                path.write_text(output.content, encoding='utf-8')
                written.append(path)
                logger.info(f"Wrote {output.format} output to {path}")
        except OSError as e:
            raise ValueError(f"Failed to write outputs to {target}: {e}")
        return written

    def validate(self, theme: ThemeSource,
                 seen_warnings: Optional[set] = None) -> List[ValidationIssue]:
        """Validate a theme; raw dicts are checked without being loaded first."""
        if isinstance(theme, (dict, ThemeConfig)):
            return validate_theme(theme, seen_warnings)
        return validate_theme(self.load_theme(theme), seen_warnings)

    def audit(self, theme: ThemeSource, level: Optional[str] = None) -> AuditResult:
        """Run the accessibility audit at ``level`` (default ``config.wcag_level``)."""
        return audit_theme_accessibility(self.resolve(theme), level or self.config.wcag_level)

    def dark_mode(self, theme: ThemeSource,
                  options: Optional[DarkModeOptions] = None) -> ThemeConfig:
        """Return the theme with a generated dark mode enabled."""
        return generate_dark_mode(self.resolve(theme), options or self._dark_mode_options())

    def _dark_mode_options(self) -> DarkModeOptions:
        return DarkModeOptions(intensity=DarkModeIntensity(self.config.dark_mode_intensity))

    def clear_cache(self) -> None:
        """Clear all theme caches."""
        self._theme_cache.clear()
        self._compiled_cache.clear()
        self.registry.clear_cache()
        logger.debug("Theme engine cache cleared")

    def _generate_cache_key(self, theme_name: str, variant: Optional[str],
                            overrides: Optional[Dict[str, Any]]) -> str:
        """Generate cache key for theme loading."""
        key_parts = [theme_name, variant or 'default']
        if overrides:
            key_parts.append(json.dumps(overrides, sort_keys=True, default=str))
        return '_'.join(key_parts)

    # Public API for theme management
    def list_themes(self) -> List[Dict[str, Any]]:
        """List all available themes."""
        return self.registry.list_available_themes()

    def theme_exists(self, theme_name: str) -> bool:
        """Check if a theme exists."""
        return self.registry.theme_exists(theme_name)

    def get_theme_info(self, theme_name: str) -> Dict[str, Any]:
        """Get detailed theme information."""
        return self.registry.get_theme_info(theme_name)

    def validate_theme(self, theme_name: str) -> List[str]:
        """Validate a registry theme and return issues."""
        return self.registry.validate_theme(theme_name)
