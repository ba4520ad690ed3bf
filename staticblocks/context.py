"""Render context assembly for StaticBlocks.

A render context is the plain mapping a template is evaluated against. The
builder creates one per page and locale; blocks and loop iterations derive
their own contexts from it without touching the original.

Key functions:
- build_render_context: Context for one page rendered in one locale.
- block_context: Context for a block instance on a page.
- loop_context: Context for one iteration of an ``{{#each}}`` loop.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .i18n import FALLBACK_LOCALE, LocaleConfig

LOOP_INDEX = "@index"
LOOP_FIRST = "@first"
LOOP_LAST = "@last"


def build_render_context(
    config: Mapping[str, Any],
    page: Mapping[str, Any] | None = None,
    locale: str | None = None,
    locale_data: Mapping[str, Any] | None = None,
    slug: str = "",
    output_path: str = "",
    base_url: str | None = None,
) -> dict[str, Any]:
    """Create the render context for a page.

    Keys from the page's ``data`` section are available at the top level;
    the keys set by this function take precedence over them.

    Args:
        config: Project configuration.
        page: Page configuration (template, title, blocks, ...).
        locale: Locale the page is rendered in.
        locale_data: Translation dictionary for ``locale``.
        slug: Page slug, e.g. ``about`` or ``blog/post``.
        output_path: Output file relative to the build directory.
        base_url: Base URL for links; defaults to ``config['baseUrl']``.

    Returns:
        New context dictionary.
    """
    page = page or {}
    i18n = LocaleConfig.from_config(config)
    default_locale = i18n.default_locale if i18n else FALLBACK_LOCALE
    current = locale or default_locale

    context: dict[str, Any] = {}
    page_data = page.get("data")
    if isinstance(page_data, Mapping):
        context.update(page_data)
    context.update(
        {
            "config": config,
            "page": page,
            "locale": locale,
            "localeData": locale_data or {},
            "slug": slug,
            "outputPath": output_path,
            "currentLang": current,
            "langPrefix": i18n.prefix_for(current) if i18n else "",
            "activeNav": page.get("activeNav"),
            "baseUrl": base_url if base_url is not None else str(config.get("baseUrl") or ""),
        }
    )
    return context


def block_context(
    context: Mapping[str, Any], block: Mapping[str, Any]
) -> dict[str, Any]:
    """Overlay a block instance's properties on a page context."""
    return {**context, **block}


def loop_context(
    outer: Mapping[str, Any], item: Any, index: int, total: int
) -> dict[str, Any]:
    """Create the context for one loop iteration.

    Mapping items are merged over the outer context; the ``@index``,
    ``@first`` and ``@last`` keys take precedence over both.

    Args:
        outer: Context surrounding the loop.
        item: Current element of the iterated list.
        index: Zero-based position of ``item``.
        total: Number of elements in the list.

    Returns:
        New context dictionary.
    """
    local: dict[str, Any] = dict(outer)
    if isinstance(item, Mapping):
        local.update(item)
    local[LOOP_INDEX] = index
    local[LOOP_FIRST] = index == 0
    local[LOOP_LAST] = index == total - 1
    return local
