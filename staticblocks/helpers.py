"""Template helpers for StaticBlocks.

Helpers are the ``{{name:args}}`` tags of a template. Each helper is a plain
function receiving the render context and the list of raw argument strings;
it decides for itself whether an argument is a literal or a path to resolve.

Key classes and functions:
- HelperRegistry: Name-to-function table consulted by the TemplateEngine.
- split_args: Turn the text after the colon into an argument list.
- create_default_registry: Registry pre-loaded with the built-in helpers.

Design principles:
- Open/Closed: Projects add or override helpers by registering them.
- Dependency Inversion: The engine receives a registry instead of relying on
  a process-wide helper table.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .html_utils import escape_html, escape_template_tags
from .i18n import FALLBACK_LOCALE, asset_url, localize_url
from .protocols import HelperFunction
from .resolver import MISSING, is_truthy, resolve_path, to_text

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_CLASS = "active"


def split_args(args: str) -> list[str]:
    """Split a helper argument string on commas and trim each argument.

    Examples:
        >>> split_args("/about/, text-blue font-bold")
        ['/about/', 'text-blue font-bold']

        >>> split_args("")
        []
    """
    if not args.strip():
        return []
    return [arg.strip() for arg in args.split(",")]


def _optional(args: list[str], index: int, default: str = "") -> str:
    return args[index] if len(args) > index and args[index] else default


class HelperRegistry:
    """Registry of template helpers.

    Registering a name that already exists replaces the previous helper.
    The registry is only written while the engine is being set up, so one
    instance can be shared by concurrent renders.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._helpers: dict[str, HelperFunction] = {}

    def register(self, name: str, fn: HelperFunction) -> None:
        """Register a helper under ``name``.

        Args:
            name: Helper name used in ``{{name:args}}`` tags.
            fn: Function of (context, args) returning the replacement text.
        """
        self._helpers[name] = fn

    def get(self, name: str) -> HelperFunction | None:
        """Return the helper registered under ``name``, or None."""
        return self._helpers.get(name)

    def names(self) -> list[str]:
        """Return all registered helper names, sorted."""
        return sorted(self._helpers)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def invoke(
        self,
        name: str,
        context: Mapping[str, Any],
        args: str,
        tag: str | None = None,
    ) -> str:
        """Run a helper and return its output.

        Unknown helpers and helpers that raise are reported through the
        module logger; the original tag text is returned in both cases so
        the rest of the template still renders.

        Args:
            name: Helper name.
            context: Render context.
            args: Raw argument text following the colon.
            tag: Original tag text, rebuilt from name and args when omitted.

        Returns:
            Helper output as text, or the original tag text on failure.
        """
        original = tag if tag is not None else f"{{{{{name}:{args}}}}}"
        helper = self._helpers.get(name)
        if helper is None:
            logger.warning("Helper not found: %s (in %s)", name, original)
            return original
        try:
            return to_text(helper(context, split_args(args)))
        except Exception:
            logger.exception("Error in helper %s (in %s)", name, original)
            return original


def current_lang(context: Mapping[str, Any]) -> str:
    """Return the language a page is rendered in.

    Falls back to the configured default locale, then to ``de``.
    """
    return str(
        context.get("currentLang")
        or resolve_path(context, "config.i18n.defaultLocale")
        or FALLBACK_LOCALE
    )


def _resolve_or_literal(context: Mapping[str, Any], arg: str) -> Any:
    value = resolve_path(context, arg, MISSING)
    return arg if value is MISSING else value


def translate_helper(context: Mapping[str, Any], args: list[str]) -> str:
    key = args[0] if args else ""
    locale_data = context.get("localeData")
    if not isinstance(locale_data, Mapping):
        return key
    translation = resolve_path(locale_data, key, MISSING)
    if isinstance(translation, (Mapping, list)) or not is_truthy(translation):
        return key
    return to_text(translation)


def current_lang_helper(context: Mapping[str, Any], args: list[str]) -> str:
    return current_lang(context)


def lang_prefix_helper(context: Mapping[str, Any], args: list[str]) -> str:
    return str(context.get("langPrefix") or "")


def active_helper(context: Mapping[str, Any], args: list[str]) -> str:
    """Return the active class when ``args[0]`` is the current navigation path.

    Usage: ``{{active:/about/}}`` or ``{{active:/about/,text-blue font-bold}}``.
    """
    path = args[0] if args else ""
    current = "/" + str(context.get("activeNav") or context.get("slug") or "")
    normalized_path = path if path.endswith("/") else f"{path}/"
    normalized_current = current if current.endswith("/") else f"{current}/"
    if normalized_path == normalized_current:
        return _optional(args, 1, DEFAULT_ACTIVE_CLASS)
    return ""


def lang_active_helper(context: Mapping[str, Any], args: list[str]) -> str:
    """Return the active class when ``args[0]`` is the current language.

    Usage: ``{{langActive:de,bg-white/10}}`` or ``{{langActive:en}}``.
    """
    lang = args[0]
    if current_lang(context).lower() == lang.lower():
        return _optional(args, 1, DEFAULT_ACTIVE_CLASS)
    return ""


def icon_helper(context: Mapping[str, Any], args: list[str]) -> str:
    """Render an icon element for the configured icon library."""
    name = args[0]
    classes = " ".join(cls for cls in args[1:] if cls)
    if resolve_path(context, "config.icons") == "lucide":
        class_attr = f' class="{classes}"' if classes else ""
        return f'<i data-lucide="{name}"{class_attr}></i>'
    extra = f" {classes}" if classes else ""
    return f'<i class="fa fa-{name}{extra}"></i>'


def url_helper(context: Mapping[str, Any], args: list[str]) -> str:
    return localize_url(
        args[0],
        base_url=str(context.get("baseUrl") or ""),
        prefix=str(context.get("langPrefix") or ""),
    )


def asset_helper(context: Mapping[str, Any], args: list[str]) -> str:
    return asset_url(args[0], base_url=str(context.get("baseUrl") or ""))


def year_helper(context: Mapping[str, Any], args: list[str]) -> str:
    return str(datetime.now().year)


def json_helper(context: Mapping[str, Any], args: list[str]) -> str:
    value = _resolve_or_literal(context, args[0] if args else "")
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def escape_helper(context: Mapping[str, Any], args: list[str]) -> str:
    """Escape a value for display, e.g. template code shown in documentation."""
    value = _resolve_or_literal(context, args[0] if args else "")
    return escape_template_tags(escape_html(to_text(value)))


def create_default_registry() -> HelperRegistry:
    """Create a registry with the built-in helpers.

    Returns:
        HelperRegistry with translate/t, currentLang, langPrefix, active,
        langActive, icon, url, asset, year, json and escape.
    """
    registry = HelperRegistry()
    registry.register("translate", translate_helper)
    registry.register("t", translate_helper)
    registry.register("currentLang", current_lang_helper)
    registry.register("langPrefix", lang_prefix_helper)
    registry.register("active", active_helper)
    registry.register("langActive", lang_active_helper)
    registry.register("icon", icon_helper)
    registry.register("url", url_helper)
    registry.register("asset", asset_helper)
    registry.register("year", year_helper)
    registry.register("json", json_helper)
    registry.register("escape", escape_helper)
    return registry
