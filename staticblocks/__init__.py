"""StaticBlocks static site generator.

This package builds static sites out of YAML page definitions composed of
HTML blocks. Its core is a small template engine resolving variables,
conditionals, loops and helper tags, plus locale-aware URL handling so the
same pages can be built for several languages.

The main entry point is the CLI module, which provides the build command.

Architecture:
- resolver: dotted-path lookups and value coercion
- helpers: helper registry and the built-in helpers
- engine: the template engine
- i18n: locale prefixes and link targets
- context: render context assembly
- builder / seo: page builds and search-engine output
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
