"""Token reference resolution.

A token reference is a dotted path string (``"colors.primary"``) that points
at another field of the same theme record. Values are classified once into
``TokenLiteral`` or ``TokenReference``; resolution then walks the record
iteratively, tracking visited paths so that cycles fail with
``TokenCycleError`` instead of looping.

Two explicit modes exist:

* ``resolve_strict`` raises on dangling references and cycles. Validation
  and strict compilation use it.
* ``resolve_lenient`` returns the original reference unchanged on failure,
  which keeps partially authored themes usable for preview.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import (
    TokenResolutionError,
    UnresolvedTokenError,
    TokenCycleError,
    ThemeValidationError,
)
from .schema import ThemeConfig
from .utils import get_path, count_leaves, deep_merge_dict

logger = logging.getLogger(__name__)

TOKEN_PATH_PATTERN = re.compile(r'^[A-Za-z_][\w-]*(?:\.[\w-]+)+$')
LITERAL_PREFIXES = ('#', 'rgb', 'hsl')

# Values never offered as reverse-lookup matches; too common to be meaningful
REVERSE_LOOKUP_SKIP = frozenset({'transparent', '#ffffff'})

ThemeLike = Union[ThemeConfig, Dict[str, Any]]


@dataclass(frozen=True)
class TokenLiteral:
    """A value that is used as-is."""
    value: Any


@dataclass(frozen=True)
class TokenReference:
    """A dotted path into the theme record."""
    path: str

    @property
    def segments(self) -> List[str]:
        return self.path.split('.')


TokenValue = Union[TokenLiteral, TokenReference]


@dataclass
class ResolutionIssue:
    """A field whose reference could not be resolved."""
    field: str
    reference: str
    message: str
    kind: str  # "unresolved" or "cycle"


@dataclass
class ResolutionResult:
    """Literal-valued theme dictionary plus the fields that failed to resolve."""
    resolved: Dict[str, Any]
    errors: List[ResolutionIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def is_token_reference(value: Any) -> bool:
    """Tell a dotted-path reference from a literal.

    True iff the value is a string that does not start with ``#``, ``rgb``
    or ``hsl`` and is a dotted identifier path.
    """
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or text.lower().startswith(LITERAL_PREFIXES):
        return False
    return '.' in text and TOKEN_PATH_PATTERN.match(text) is not None


def parse_token_value(value: Any) -> TokenValue:
    """Classify a raw field value."""
    if is_token_reference(value):
        return TokenReference(value.strip())
    return TokenLiteral(value)


def _as_record(theme: ThemeLike) -> Dict[str, Any]:
    if isinstance(theme, ThemeConfig):
        return theme.to_dict()
    return theme


class _Resolver:
    """Resolves references against one record, computing the chain bound once."""

    def __init__(self, record: Dict[str, Any]):
        self.record = record
        self.bound = max(count_leaves(record), 1)

    def strict(self, value: Any) -> Any:
        chain: List[str] = []
        current = value

        while True:
            token = parse_token_value(current)
            if isinstance(token, TokenLiteral):
                return token.value

            path = token.path
            if path in chain:
                cycle = chain + [path]
                raise TokenCycleError(
                    f"Token reference cycle: {' -> '.join(cycle)}", path, cycle
                )
            chain.append(path)
            if len(chain) > self.bound:
                raise TokenCycleError(
                    f"Token reference chain exceeds {self.bound} steps at '{path}'",
                    path, chain,
                )

            found, target = get_path(self.record, path)
            if not found:
                raise UnresolvedTokenError(
                    f"Token reference '{path}' does not exist", path, chain
                )
            if isinstance(target, (dict, list)):
                raise UnresolvedTokenError(
                    f"Token reference '{path}' points at a section, not a value",
                    path, chain,
                )
            current = target

    def lenient(self, value: Any) -> Any:
        try:
            return self.strict(value)
        except TokenResolutionError as e:
            logger.debug(f"Leaving {value!r} unresolved: {e}")
            return value


def resolve_strict(reference: Any, theme: ThemeLike) -> Any:
    """Resolve a reference to a literal or raise.

    Args:
        reference: Literal or dotted path
        theme: ThemeConfig or interchange dictionary

    Returns:
        The literal value at the end of the reference chain

    Raises:
        UnresolvedTokenError: A path segment is missing or the path ends at a section
        TokenCycleError: The chain revisits a path or exceeds the record's field count
    """
    return _Resolver(_as_record(theme)).strict(reference)


def resolve_lenient(reference: Any, theme: ThemeLike) -> Any:
    """Resolve a reference, returning it unchanged if resolution fails."""
    return _Resolver(_as_record(theme)).lenient(reference)


def resolve_token(reference: Any, theme: ThemeLike, strict: bool = False) -> Any:
    if strict:
        return resolve_strict(reference, theme)
    return resolve_lenient(reference, theme)


def find_token_for_value(value: Any, theme: ThemeLike) -> Optional[str]:
    """Reverse lookup: the first dotted path whose value equals ``value``.

    Colors are matched case-insensitively; numbers are matched against
    ``spacing.values``.

    Returns:
        Dotted path such as ``colors.primary``, or None
    """
    record = _as_record(theme)

    if isinstance(value, str):
        wanted = value.strip().lower()
        if wanted in REVERSE_LOOKUP_SKIP:
            return None
        for role, color in record.get('colors', {}).items():
            if isinstance(color, str) and color.strip().lower() == wanted:
                return f"colors.{role}"
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        values = (record.get('spacing') or {}).get('values') or {}
        for index, amount in values.items():
            if amount == value:
                return f"spacing.values.{index}"
    return None


def resolve_variant_tokens(variants: Optional[Dict[str, Dict[str, Any]]],
                           theme: ThemeLike, strict: bool = False) -> Dict[str, Dict[str, Any]]:
    """Resolve every field of a per-variant style record.

    Args:
        variants: Mapping of variant name to style fields (buttons or cards)
        theme: Theme the references point into
        strict: Raise on unresolvable references instead of passing them through

    Returns:
        Literal-valued copy of ``variants``
    """
    if not variants:
        return {}
    resolver = _Resolver(_as_record(theme))
    resolve = resolver.strict if strict else resolver.lenient

    resolved = {}
    for name, style in variants.items():
        if hasattr(style, 'model_dump'):
            style = style.model_dump(by_alias=True, exclude_none=True)
        resolved[name] = {key: resolve(value) for key, value in (style or {}).items()
                          if value is not None}
    return resolved


def resolve_button_tokens(theme: ThemeConfig, strict: bool = False) -> Dict[str, Dict[str, Any]]:
    return resolve_variant_tokens(theme.to_dict().get('buttons'), theme, strict)


def resolve_card_tokens(theme: ThemeConfig, strict: bool = False) -> Dict[str, Dict[str, Any]]:
    return resolve_variant_tokens(theme.to_dict().get('cards'), theme, strict)


def _resolve_tree(node: Any, prefix: str, resolver: _Resolver,
                  errors: List[ResolutionIssue]) -> Any:
    if isinstance(node, dict):
        return {
            key: _resolve_tree(value, f"{prefix}.{key}" if prefix else str(key), resolver, errors)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [_resolve_tree(value, f"{prefix}.{i}", resolver, errors)
                for i, value in enumerate(node)]
    if not is_token_reference(node):
        return node

    try:
        return resolver.strict(node)
    except TokenCycleError as e:
        errors.append(ResolutionIssue(prefix, node, str(e), "cycle"))
    except UnresolvedTokenError as e:
        errors.append(ResolutionIssue(prefix, node, str(e), "unresolved"))
    return node


def dark_mode_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """The record dark-mode references resolve against: light values with dark overrides merged."""
    dark = record.get('darkMode') or {}
    overlay = {
        section: dark[section]
        for section in ('colors', 'buttons', 'cards')
        if dark.get(section)
    }
    base = {key: value for key, value in record.items() if key != 'darkMode'}
    return deep_merge_dict(base, overlay)


def resolve_theme(theme: ThemeLike, strict: bool = False) -> ResolutionResult:
    """Resolve every reference in a theme.

    Light fields resolve against the light record; ``darkMode`` overrides
    resolve against the dark-merged record, so ``colors.text`` inside a dark
    card means the dark text color. Unresolvable fields keep their original
    string and are reported in ``errors``.

    Args:
        theme: Theme to resolve
        strict: Raise ThemeValidationError after collecting every failure

    Returns:
        ResolutionResult with the literal-valued dictionary
    """
    record = _as_record(theme)
    errors: List[ResolutionIssue] = []

    light = {key: value for key, value in record.items() if key != 'darkMode'}
    resolved = _resolve_tree(light, "", _Resolver(light), errors)

    if record.get('darkMode'):
        dark_resolver = _Resolver(dark_mode_record(record))
        resolved['darkMode'] = _resolve_tree(record['darkMode'], "darkMode", dark_resolver, errors)

    for issue in errors:
        logger.debug(f"Unresolved token at {issue.field}: {issue.message}")

    if strict and errors:
        raise ThemeValidationError(
            f"{len(errors)} token reference(s) could not be resolved", errors
        )
    return ResolutionResult(resolved=resolved, errors=errors)
