"""Locale and URL resolution for StaticBlocks.

Pages are built once per configured locale. Depending on the i18n strategy,
the non-default locales (or all of them) live under a ``/<locale>`` URL
prefix. This module computes those prefixes and turns template paths into
final link targets.

Key pieces:
- LocaleConfig: i18n settings read from the project configuration.
- locale_prefix: URL prefix for a locale under a given strategy.
- localize_url: Link target for ``{{url:...}}``; the site root is never prefixed.
- asset_url: Link target for ``{{asset:...}}``; never prefixed.
- output_path / page_url: Where a page is written and where it is served.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from .html_utils import join_root_url

FALLBACK_LOCALE = "de"


class Strategy(str, Enum):
    """How locales are reflected in URLs."""

    PREFIX = "prefix"
    PREFIX_EXCEPT_DEFAULT = "prefix_except_default"


@dataclass(frozen=True)
class LocaleConfig:
    """Internationalization settings of a project.

    Attributes:
        default_locale: Locale served without a prefix under
            ``prefix_except_default``.
        locales: Every locale the site is built for, in order.
        strategy: URL prefix strategy.
    """

    default_locale: str
    locales: tuple[str, ...]
    strategy: Strategy = Strategy.PREFIX_EXCEPT_DEFAULT

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> LocaleConfig | None:
        """Read the ``i18n`` section of a project configuration.

        Args:
            config: Project configuration mapping.

        Returns:
            LocaleConfig, or None when the project has i18n disabled.
        """
        if not isinstance(config, Mapping):
            return None
        section = config.get("i18n")
        if not isinstance(section, Mapping):
            return None
        default_locale = str(section.get("defaultLocale") or FALLBACK_LOCALE)
        locales = tuple(str(code) for code in section.get("locales") or [default_locale])
        strategy = Strategy(section.get("strategy") or Strategy.PREFIX_EXCEPT_DEFAULT)
        return cls(default_locale=default_locale, locales=locales, strategy=strategy)

    def prefix_for(self, locale: str) -> str:
        """Return the URL prefix for ``locale`` under this configuration."""
        return locale_prefix(locale, self.default_locale, self.strategy)


def locale_prefix(
    locale: str,
    default_locale: str,
    strategy: Strategy | str,
    i18n_enabled: bool = True,
) -> str:
    """Compute the URL prefix for a locale.

    Args:
        locale: Locale being rendered.
        default_locale: Project default locale.
        strategy: ``prefix`` or ``prefix_except_default``.
        i18n_enabled: False when the project has no i18n configuration.

    Returns:
        ``""`` or ``"/<locale>"``.

    Examples:
        >>> locale_prefix("en", "en", "prefix_except_default")
        ''

        >>> locale_prefix("en", "en", "prefix")
        '/en'
    """
    if not i18n_enabled:
        return ""
    if Strategy(strategy) is Strategy.PREFIX_EXCEPT_DEFAULT and locale == default_locale:
        return ""
    return f"/{locale}"


def _leading_slash(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def localize_url(path: str, base_url: str = "", prefix: str = "") -> str:
    """Build a link target for a site path.

    The root path ``/`` never receives the locale prefix, so links to the
    site root always point at the default-locale home page. Other paths lose
    one trailing slash and gain the prefix. Paths are not inspected for
    locale codes they may already contain.

    Args:
        path: Site path, with or without a leading slash.
        base_url: Optional base URL the result is joined onto.
        prefix: Locale prefix of the page being rendered.

    Returns:
        Final link target.

    Examples:
        >>> localize_url("/about/", prefix="/de")
        '/de/about'

        >>> localize_url("/", prefix="/de")
        '/'
    """
    normalized = _leading_slash(path)
    if normalized == "/":
        return join_root_url(base_url, normalized)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return join_root_url(base_url, f"{prefix}{normalized}")


def asset_url(path: str, base_url: str = "") -> str:
    """Build a link target for a static asset (no locale prefix)."""
    return join_root_url(base_url, _leading_slash(path))


def output_path(
    slug: str, locale: str | None = None, default_locale: str | None = None
) -> str:
    """Return the output file of a page, relative to the build directory.

    Args:
        slug: Page slug such as ``index`` or ``blog/post``.
        locale: Locale the page is built for.
        default_locale: Project default locale, written without a prefix.

    Returns:
        POSIX path like ``de/about/index.html``.
    """
    parts: list[str] = []
    if locale and locale != default_locale:
        parts.append(locale)
    if slug != "index":
        parts.append(slug)
    parts.append("index.html")
    return str(PurePosixPath(*parts))


def clean_slug(slug: str) -> str:
    """Drop ``index`` page names from a slug (``docs/index`` -> ``docs``)."""
    if slug == "index":
        return ""
    return slug[: -len("/index")] if slug.endswith("/index") else slug


def page_url(slug: str, prefix: str = "") -> str:
    """Return the public path a built page is served at.

    Examples:
        >>> page_url("index", "/de")
        '/de/'

        >>> page_url("blog/post")
        '/blog/post/'
    """
    cleaned = clean_slug(slug)
    if not cleaned:
        return f"{prefix}/"
    return f"{prefix}/{cleaned}/"
