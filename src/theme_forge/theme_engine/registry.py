"""Theme registry for managing built-in presets and user themes.

This module provides the ThemeRegistry class for discovering, loading, and
caching theme records from the bundled presets and the user's themes
directory. Theme files may inherit from another theme with ``extends:``.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Set

import yaml

from .errors import ThemeForgeError
from .schema import Severity, ThemeConfig
from .utils import deep_merge_dict

logger = logging.getLogger(__name__)

DEFAULT_THEME_NAME = "default"


class CircularInheritanceError(ThemeForgeError):
    """A theme's ``extends`` chain leads back to itself."""

    def __init__(self, chain: List[str]):
        self.chain = chain
        super().__init__(f"Circular inheritance detected: {' -> '.join(chain)}")


def load_theme_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML or JSON theme file.

    Raises:
        ValueError: The file is unreadable, malformed or not a mapping
    """
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {file_path}: {e}")
    except OSError as e:
        raise ValueError(f"Error reading {file_path}: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Theme file {file_path} does not contain a mapping")
    return data


class ThemeRegistry:
    """Registry for built-in presets and user theme files."""

    def __init__(self, user_dir: Optional[Path] = None):
        """Initialize the theme registry.

        Args:
            user_dir: Directory holding user themes (``*.yaml``/``*.json``);
                defaults to ``~/.theme-forge/themes``
        """
        self.package_dir = Path(__file__).parent.parent
        self.builtin_themes_dir = self.package_dir / "presets"

        if user_dir:
            self.user_themes_dir = Path(user_dir).expanduser()
        else:
            self.user_themes_dir = Path.home() / ".theme-forge" / "themes"

        self.user_themes_dir.mkdir(parents=True, exist_ok=True)

        # Cache for loaded themes
        self._data_cache: Dict[str, Dict[str, Any]] = {}
        self._theme_cache: Dict[str, ThemeConfig] = {}

        self._builtin_themes: Set[str] = set()
        self._user_themes: Set[str] = set()

        self._scan_builtin_themes()
        self._scan_user_themes()

    def _scan_builtin_themes(self) -> None:
        """Scan for built-in preset files."""
        self._builtin_themes.clear()

        if not self.builtin_themes_dir.exists():
            logger.warning(f"Built-in presets directory not found: {self.builtin_themes_dir}")
            return

        for theme_file in self.builtin_themes_dir.glob("*.yaml"):
            self._builtin_themes.add(theme_file.stem)
            logger.debug(f"Found built-in theme: {theme_file.stem}")

    def _scan_user_themes(self) -> None:
        """Scan for user theme files."""
        self._user_themes.clear()

        for pattern in ("*.yaml", "*.yml", "*.json"):
            for theme_file in self.user_themes_dir.glob(pattern):
                self._user_themes.add(theme_file.stem)
                logger.debug(f"Found user theme: {theme_file.stem}")

    def list_available_themes(self) -> List[Dict[str, Any]]:
        """List all available themes with metadata.

        Returns:
            List of theme info dictionaries
        """
        themes = []
        listed = [(name, 'builtin') for name in sorted(self._builtin_themes)]
        listed += [(name, 'user') for name in sorted(self._user_themes - self._builtin_themes)]

        for theme_name, theme_type in listed:
            try:
                data = self.load_theme_data(theme_name)
                meta = data.get('meta', {})
                themes.append({
                    'name': theme_name,
                    'display_name': meta.get('name', theme_name),
                    'description': meta.get('description'),
                    'author': meta.get('author'),
                    'version': meta.get('version'),
                    'tags': meta.get('tags') or [],
                    'type': theme_type,
                    'extends': self._read_raw(theme_name).get('extends'),
                })
            except (ValueError, FileNotFoundError, ThemeForgeError) as e:
                logger.error(f"Error loading theme {theme_name}: {e}")
                themes.append({
                    'name': theme_name,
                    'display_name': theme_name,
                    'description': f"Error loading theme: {e}",
                    'type': theme_type,
                    'error': True,
                })

        return themes

    def theme_exists(self, theme_name: str) -> bool:
        return theme_name in self._builtin_themes or theme_name in self._user_themes

    def _theme_path(self, theme_name: str) -> Path:
        """Locate a theme file; user themes shadow built-in presets.

        Raises:
            FileNotFoundError: If theme file not found
        """
        for suffix in (".yaml", ".yml", ".json"):
            path = self.user_themes_dir / f"{theme_name}{suffix}"
            if path.exists():
                return path

        builtin_path = self.builtin_themes_dir / f"{theme_name}.yaml"
        if builtin_path.exists():
            return builtin_path

        raise FileNotFoundError(f"Theme '{theme_name}' not found")

    def _read_raw(self, theme_name: str) -> Dict[str, Any]:
        return load_theme_file(self._theme_path(theme_name))

    def resolve_inheritance(self, data: Dict[str, Any], theme_name: str,
                            _chain: Optional[List[str]] = None) -> Dict[str, Any]:
        """Deep merge a theme record onto the theme it ``extends``.

        Args:
            data: Raw theme record, possibly with an ``extends`` key
            theme_name: Name used for cycle detection and the default meta name
            _chain: Themes already being resolved

        Returns:
            Merged record without the ``extends`` key

        Raises:
            CircularInheritanceError: The chain revisits a theme
            FileNotFoundError: A parent theme does not exist
        """
        chain = (_chain or []) + [theme_name]
        data = dict(data)
        parent_name = data.pop('extends', None)

        if parent_name:
            if parent_name in chain:
                raise CircularInheritanceError(chain + [parent_name])
            parent = self.resolve_inheritance(self._read_raw(parent_name), parent_name, chain)
            # Identity never comes from the parent
            parent_meta = parent.get('meta', {})
            parent['meta'] = {k: v for k, v in parent_meta.items()
                              if k not in ('name', 'description', 'author', 'version')}
            data = deep_merge_dict(parent, data)

        meta = data.setdefault('meta', {})
        if isinstance(meta, dict) and not meta.get('name'):
            meta['name'] = theme_name.replace('_', ' ').replace('-', ' ').title()
        return data

    def load_theme_data(self, theme_name: str) -> Dict[str, Any]:
        """Load a theme's merged interchange dictionary.

        Raises:
            FileNotFoundError: If the theme file is not found
            ValueError: If the theme file is malformed
            CircularInheritanceError: If ``extends`` loops
        """
        if theme_name not in self._data_cache:
            self._data_cache[theme_name] = self.resolve_inheritance(
                self._read_raw(theme_name), theme_name
            )
        return copy.deepcopy(self._data_cache[theme_name])

    def load_theme(self, theme_name: str) -> ThemeConfig:
        """Load a theme by name.

        Returns:
            ThemeConfig instance

        Raises:
            FileNotFoundError: If theme file not found
            ValueError: If theme definition is invalid
        """
        if theme_name in self._theme_cache:
            return self._theme_cache[theme_name]

        data = self.load_theme_data(theme_name)
        try:
            theme = ThemeConfig.from_dict(data)
        except ValueError as e:
            raise ValueError(f"Invalid theme definition for '{theme_name}': {e}")

        self._theme_cache[theme_name] = theme
        return theme

    def save_user_theme(self, theme: ThemeConfig, name: Optional[str] = None,
                        overwrite: bool = False) -> Path:
        """Save a theme to the user themes directory as YAML.

        Args:
            theme: Theme to save
            name: File name stem; defaults to the theme's slug
            overwrite: Whether to overwrite an existing theme

        Returns:
            Path of the written file

        Raises:
            FileExistsError: If theme exists and overwrite=False
        """
        theme_name = name or theme.slug
        theme_path = self.user_themes_dir / f"{theme_name}.yaml"

        if theme_path.exists() and not overwrite:
            raise FileExistsError(f"Theme '{theme_name}' already exists")

        try:
            with open(theme_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(theme.to_dict(), f, default_flow_style=False,
                               indent=2, sort_keys=False, allow_unicode=True)
        except OSError as e:
            raise ValueError(f"Error saving theme '{theme_name}': {e}")

        self._user_themes.add(theme_name)
        self._data_cache.clear()
        self._theme_cache.clear()
        logger.info(f"Saved user theme: {theme_name}")
        return theme_path

    def delete_user_theme(self, theme_name: str) -> bool:
        """Delete a user theme.

        Returns:
            True if theme was deleted, False if not found
        """
        deleted = False
        for suffix in (".yaml", ".yml", ".json"):
            path = self.user_themes_dir / f"{theme_name}{suffix}"
            if path.exists():
                path.unlink()
                deleted = True

        if deleted:
            self._user_themes.discard(theme_name)
            self._data_cache.clear()
            self._theme_cache.clear()
            logger.info(f"Deleted user theme: {theme_name}")

        return deleted

    def validate_theme(self, theme_name: str) -> List[str]:
        """Validate a theme and return any issues.

        Returns:
            List of validation issues (empty if valid)
        """
        from .validation import validate_theme

        try:
            data = self.load_theme_data(theme_name)
        except (ValueError, FileNotFoundError, ThemeForgeError) as e:
            return [f"Failed to load theme: {e}"]

        return [
            f"[{Severity(issue.severity).value}] {issue}"
            for issue in validate_theme(data)
        ]

    def get_presets_by_tag(self, tag: str) -> List[str]:
        """Names of built-in presets carrying ``tag`` in ``meta.tags``."""
        wanted = tag.lower()
        matches = []
        for theme_name in sorted(self._builtin_themes):
            try:
                tags = self.load_theme_data(theme_name).get('meta', {}).get('tags') or []
            except (ValueError, FileNotFoundError, ThemeForgeError):
                continue
            if wanted in (t.lower() for t in tags):
                matches.append(theme_name)
        return matches

    def get_theme_info(self, theme_name: str) -> Dict[str, Any]:
        """Get detailed information about a theme."""
        theme_type = 'builtin' if theme_name in self._builtin_themes else 'user'
        try:
            theme = self.load_theme(theme_name)
            return {
                'name': theme_name,
                'display_name': theme.meta.name,
                'description': theme.meta.description,
                'version': theme.meta.version,
                'author': theme.meta.author,
                'tags': theme.meta.tags or [],
                'extends': self._read_raw(theme_name).get('extends'),
                'colors': theme.color_map(),
                'typography': {
                    'font_family': theme.typography.font_family,
                    'base_size': theme.typography.base_size,
                    'scale': theme.typography.scale,
                },
                'dark_mode': theme.dark_mode_enabled,
                'type': theme_type,
                'validation_issues': self.validate_theme(theme_name),
            }
        except (ValueError, FileNotFoundError, ThemeForgeError) as e:
            return {'name': theme_name, 'error': str(e), 'type': theme_type}

    def get_default_theme_name(self) -> str:
        if DEFAULT_THEME_NAME in self._builtin_themes or not self._builtin_themes:
            return DEFAULT_THEME_NAME
        return sorted(self._builtin_themes)[0]

    def clear_cache(self) -> None:
        """Clear the theme cache and rescan."""
        self._data_cache.clear()
        self._theme_cache.clear()
        self._scan_builtin_themes()
        self._scan_user_themes()
