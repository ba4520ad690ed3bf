"""Protocol definitions for StaticBlocks.

This module defines the interfaces (protocols) shared by the template
engine, its helpers and the page builder, following the Dependency
Inversion Principle (DIP) of SOLID.

These protocols enable:
- Loose coupling between the builder and the engine
- Easy testing through stand-in helpers and renderers
- Extensibility without modifying existing code (Open/Closed Principle)
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HelperFunction(Protocol):
    """Protocol for template helpers invoked as ``{{name:args}}``.

    Helpers must not mutate the context; the same context may be handed to
    several helpers during one render.
    """

    @abstractmethod
    def __call__(self, context: Mapping[str, Any], args: list[str]) -> str:
        """Produce the replacement text for a helper tag.

        Args:
            context: Render context of the template being rendered.
            args: Trimmed raw argument strings, not path-resolved.

        Returns:
            Text inserted in place of the tag.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for rendering template strings against a context."""

    @abstractmethod
    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Render a template string.

        Args:
            template: Template string to render.
            context: Variables to make available in the template.

        Returns:
            Rendered string.
        """
        ...
