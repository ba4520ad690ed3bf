"""Site building functionality for StaticBlocks.

This module turns a project on disk into a static site. Every page is a YAML
file listing the blocks it is made of; it is rendered once per configured
locale into the output directory.

Project layout::

    staticblocks.yaml        project configuration
    src/pages/**/*.yaml      page configurations
    src/templates/*.html     page templates (``{{blocks}}`` marks the content)
    src/blocks/*.html        blocks, with optional .js/.css companions
    src/locales/*.json       translation dictionaries
    src/assets/**            copied verbatim

Key functions:
- build_site: Main function to build the entire site.
- build_page: Render one page in one locale.
- load_config: Loads project configuration from staticblocks.yaml.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .context import block_context, build_render_context
from .engine import TemplateEngine
from .i18n import LocaleConfig, output_path
from .seo import inject_meta_tags, meta_tags, robots_txt, sitemap_entries, sitemap_xml
from .utils import copy_tree, ensure_clean_dir, iter_files, page_slug

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "staticblocks.yaml"

DEFAULT_CONFIG = {
    "css": "tailwind",
    "icons": "lucide",
    "outputDir": "dist",
}

# Block output is shielded from the final template pass with these markers.
_OPEN_PLACEHOLDER = "__TEMPLATE_OPEN__"
_CLOSE_PLACEHOLDER = "__TEMPLATE_CLOSE__"

# Block properties rendered verbatim so code samples keep their template tags.
_UNTRANSLATED_PROPS = frozenset({"code"})


class ConfigError(Exception):
    """Project configuration is missing or unreadable."""


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuiltPage:
    """A page written by the builder.

    Attributes:
        slug: Page slug, e.g. ``about`` or ``blog/post``.
        locale: Locale the page was rendered in (None without i18n).
        output_path: Output file relative to the output directory.
    """

    slug: str
    locale: str | None
    output_path: str


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Every page written, one per page and locale.
        output_dir: Directory where the site was built.
        config: Project configuration used for the build.
    """

    pages: list[BuiltPage]
    output_dir: Path
    config: dict[str, Any] = field(default_factory=dict)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from staticblocks.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is missing, invalid YAML, or not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        raise ConfigError(
            f"{CONFIG_FILENAME} not found in {project_root}. "
            "Are you in a StaticBlocks project?"
        )
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {CONFIG_FILENAME}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping")
    config = DEFAULT_CONFIG.copy()
    config.update(loaded)
    return config


def load_page_config(path: Path) -> dict[str, Any]:
    """Load a page configuration from YAML.

    Args:
        path: Path to the page file.

    Returns:
        Page configuration; ``blocks`` is always a list.

    Raises:
        BuildError: If the file is invalid YAML or not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            page = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise BuildError(path, f"Invalid YAML: {exc}", exc) from exc
    if not isinstance(page, dict):
        raise BuildError(path, "Page configuration must be a mapping")
    page.setdefault("blocks", [])
    if page["blocks"] is None:
        page["blocks"] = []
    return page


def load_locale(project_root: Path, locale: str) -> dict[str, Any]:
    """Load the translation dictionary of a locale.

    Args:
        project_root: Root directory of the project.
        locale: Locale code, e.g. ``en``.

    Returns:
        Parsed JSON dictionary.

    Raises:
        FileNotFoundError: If src/locales/<locale>.json does not exist.
    """
    locale_path = project_root / "src" / "locales" / f"{locale}.json"
    if not locale_path.exists():
        raise FileNotFoundError(f"Locale file not found: {locale}.json")
    with open(locale_path, encoding="utf-8") as f:
        data = json.load(f)
    return data if isinstance(data, dict) else {}


def _locale_data(
    project_root: Path, locale: str | None, i18n: LocaleConfig | None
) -> dict[str, Any]:
    if i18n is None or locale is None:
        return {}
    try:
        return load_locale(project_root, locale)
    except FileNotFoundError:
        logger.warning("Locale %s not found, using %s", locale, i18n.default_locale)
    try:
        return load_locale(project_root, i18n.default_locale)
    except FileNotFoundError:
        logger.warning("Default locale %s not found", i18n.default_locale)
        return {}


def translate_page_config(
    engine: TemplateEngine, page: Mapping[str, Any], context: Mapping[str, Any]
) -> dict[str, Any]:
    """Render template tags inside page configuration values.

    The title, the meta description and every string block property
    containing ``{{`` are rendered; ``code`` properties are kept verbatim.

    Args:
        engine: Template engine.
        page: Page configuration as loaded from YAML.
        context: Render context of the page.

    Returns:
        New page configuration; ``page`` is not modified.
    """
    translated = dict(page)
    title = page.get("title")
    if isinstance(title, str) and "{{" in title:
        translated["title"] = engine.render(title, context)

    meta = page.get("meta")
    if isinstance(meta, Mapping):
        description = meta.get("description")
        if isinstance(description, str) and "{{" in description:
            translated["meta"] = {
                **meta,
                "description": engine.render(description, context),
            }

    blocks = []
    for block in page.get("blocks") or []:
        if not isinstance(block, Mapping):
            continue
        blocks.append(
            {
                key: engine.render(value, context)
                if isinstance(value, str)
                and "{{" in value
                and key not in _UNTRANSLATED_PROPS
                else value
                for key, value in block.items()
            }
        )
    translated["blocks"] = blocks
    return translated


def _render_blocks(
    engine: TemplateEngine,
    src_dir: Path,
    blocks: list[Mapping[str, Any]],
    context: Mapping[str, Any],
) -> str:
    rendered: list[str] = []
    for block in blocks:
        name = block.get("block")
        block_path = src_dir / "blocks" / f"{name}.html"
        if not name or not block_path.exists():
            logger.warning("Block not found: %s.html", name)
            rendered.append("")
            continue
        template = block_path.read_text(encoding="utf-8")
        rendered.append(engine.render(template, block_context(context, block)))
    return "\n".join(rendered)


def _block_names(blocks: list[Mapping[str, Any]]) -> list[str]:
    names: list[str] = []
    for block in blocks:
        name = block.get("block")
        if name and name not in names:
            names.append(str(name))
    return names


def _script_tags(src_dir: Path, blocks: list[Mapping[str, Any]]) -> str:
    scripts = [
        f"/assets/js/blocks/{name}.js"
        for name in _block_names(blocks)
        if (src_dir / "blocks" / f"{name}.js").exists()
    ]
    if (src_dir / "assets" / "js" / "main.js").exists():
        scripts.append("/assets/js/main.js")
    return "\n  ".join(f'<script type="module" src="{src}"></script>' for src in scripts)


def _style_tags(src_dir: Path, blocks: list[Mapping[str, Any]]) -> str:
    styles = [
        f"/assets/css/blocks/{name}.css"
        for name in _block_names(blocks)
        if (src_dir / "blocks" / f"{name}.css").exists()
    ]
    return "\n  ".join(f'<link rel="stylesheet" href="{href}">' for href in styles)


def render_page(
    engine: TemplateEngine,
    project_root: Path,
    page_path: Path,
    page: Mapping[str, Any],
    context: Mapping[str, Any],
) -> str:
    """Render a page configuration into HTML.

    Args:
        engine: Template engine.
        project_root: Root directory of the project.
        page_path: Page file, used for error reporting.
        page: Translated page configuration.
        context: Render context of the page.

    Returns:
        Rendered HTML.

    Raises:
        BuildError: If the page's template does not exist.
    """
    src_dir = project_root / "src"
    template_name = page.get("template") or "default"
    template_path = src_dir / "templates" / f"{template_name}.html"
    if not template_path.exists():
        raise BuildError(page_path, f"Template not found: {template_name}.html")
    template = template_path.read_text(encoding="utf-8")

    blocks = page.get("blocks") or []
    blocks_html = _render_blocks(engine, src_dir, blocks, context)
    blocks_html = blocks_html.replace("{{", _OPEN_PLACEHOLDER).replace(
        "}}", _CLOSE_PLACEHOLDER
    )

    template = template.replace("{{blocks}}", blocks_html, 1)
    template = template.replace("{{scripts}}", _script_tags(src_dir, blocks), 1)
    template = template.replace("{{styles}}", _style_tags(src_dir, blocks), 1)
    template = inject_meta_tags(
        template,
        meta_tags(page, context["config"], context.get("slug", ""), context.get("langPrefix", "")),
    )

    output = engine.render(template, context)
    return output.replace(_OPEN_PLACEHOLDER, "{{").replace(_CLOSE_PLACEHOLDER, "}}")


def build_page(
    engine: TemplateEngine,
    project_root: Path,
    output_dir: Path,
    config: dict[str, Any],
    page_path: Path,
    page: Mapping[str, Any],
    slug: str,
    locale: str | None,
) -> BuiltPage:
    """Render one page in one locale and write it to the output directory.

    Returns:
        Description of the written page.
    """
    i18n = LocaleConfig.from_config(config)
    relative = output_path(slug, locale, i18n.default_locale if i18n else None)
    locale_data = _locale_data(project_root, locale, i18n)

    base_context = build_render_context(
        config, page, locale, locale_data, slug="", output_path=""
    )
    translated = translate_page_config(engine, page, base_context)
    context = build_render_context(
        config, translated, locale, locale_data, slug=slug, output_path=relative
    )
    html = render_page(engine, project_root, page_path, translated, context)

    target = output_dir / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(html)
    logger.info("Built %s (%s) -> %s", slug, locale or "-", relative)
    return BuiltPage(slug=slug, locale=locale, output_path=relative)


def build_site(
    project_root: Path,
    engine: TemplateEngine | None = None,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        engine: Template engine; defaults to one with the built-in helpers.
        output_dir_override: Optional path to write the build output instead
            of the configured ``outputDir``.

    Returns:
        BuildResult listing every page written.

    Raises:
        ConfigError: If the project configuration cannot be loaded.
        BuildError: If a page cannot be loaded or rendered.
    """
    config = load_config(project_root)
    engine = engine or TemplateEngine()
    src_dir = project_root / "src"
    pages_dir = src_dir / "pages"
    output_dir = output_dir_override or (project_root / str(config["outputDir"]))
    ensure_clean_dir(output_dir)

    page_files = iter_files(pages_dir, ".yaml")
    if not page_files:
        logger.warning("No pages found to build in %s", pages_dir)

    i18n = LocaleConfig.from_config(config)
    locales: tuple[str | None, ...] = i18n.locales if i18n else (None,)

    built: list[BuiltPage] = []
    slugs: list[str] = []
    for page_path in page_files:
        slug = page_slug(pages_dir, page_path)
        slugs.append(slug)
        page = load_page_config(page_path)
        for locale in locales:
            try:
                built.append(
                    build_page(
                        engine, project_root, output_dir, config, page_path, page, slug, locale
                    )
                )
            except BuildError:
                raise
            except Exception as exc:
                raise BuildError(page_path, _format_error_message(exc), exc) from exc

    copy_tree(src_dir / "assets", output_dir / "assets")
    _copy_block_assets(src_dir / "blocks", output_dir / "assets")
    _write_seo_files(output_dir, config, slugs)
    return BuildResult(pages=built, output_dir=output_dir, config=config)


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    if isinstance(exc, json.JSONDecodeError):
        return f"Invalid locale JSON: {exc}"
    if isinstance(exc, OSError):
        return f"File error: {exc}"
    return f"{error_type}: {exc}"


def _copy_block_assets(blocks_dir: Path, assets_dir: Path) -> None:
    """Copy block scripts and styles to where the page tags point."""
    for path in iter_files(blocks_dir, ".js"):
        target = assets_dir / "js" / "blocks" / path.name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(path.read_bytes())
    for path in iter_files(blocks_dir, ".css"):
        target = assets_dir / "css" / "blocks" / path.name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(path.read_bytes())


def _write_seo_files(output_dir: Path, config: dict[str, Any], slugs: list[str]) -> None:
    """Write sitemap.xml (when a site URL is configured) and robots.txt."""
    entries = sitemap_entries(slugs, config)
    if entries:
        (output_dir / "sitemap.xml").write_text(sitemap_xml(entries), encoding="utf-8")
    else:
        logger.warning("No siteUrl configured, skipping sitemap generation")
    (output_dir / "robots.txt").write_text(robots_txt(config), encoding="utf-8")
