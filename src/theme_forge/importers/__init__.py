"""Theme importers.

Every importer is best effort and returns an ImportResult instead of
raising. ``auto_import`` sniffs the content and picks one.
"""

import json
import logging
from typing import Any, Dict, Union

from .base import ImportResult
from .css import import_from_css, parse_css_variables
from .figma import import_from_figma
from .json_theme import import_from_json
from .tailwind import import_from_tailwind, js_config_to_dict

logger = logging.getLogger(__name__)


def detect_format(content: Union[str, Dict[str, Any]]) -> str:
    """Name of the importer suited to ``content``: css, figma, tailwind or json."""
    data = content
    if isinstance(content, str):
        text = content.strip()
        if text.startswith(('{', '[')):
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                data = None
        elif 'module.exports' in text or 'export default' in text:
            return 'tailwind'
        elif '--' in text and '{' in text:
            return 'css'
        else:
            return 'json'

    if isinstance(data, dict):
        if 'collections' in data or isinstance(data.get('global'), dict):
            return 'figma'
        theme = data.get('theme')
        if isinstance(theme, dict) and ('extend' in theme or 'colors' in theme or 'screens' in theme):
            return 'tailwind'
    return 'json'


IMPORTERS = {
    'css': import_from_css,
    'json': import_from_json,
    'tailwind': import_from_tailwind,
    'figma': import_from_figma,
}


def auto_import(content: Union[str, Dict[str, Any]]) -> ImportResult:
    """Detect the format of ``content`` and import it."""
    source_format = detect_format(content)
    logger.debug(f"Detected {source_format} input")
    return IMPORTERS[source_format](content)


__all__ = [
    "IMPORTERS",
    "ImportResult",
    "auto_import",
    "detect_format",
    "import_from_css",
    "import_from_figma",
    "import_from_json",
    "import_from_tailwind",
    "js_config_to_dict",
    "parse_css_variables",
]
