"""Template rendering engine for StaticBlocks.

Templates are plain text with ``{{...}}`` tags. ``render`` resolves them in a
fixed order:

1. Conditionals: ``{{#if cond}}...{{#else}}...{{/if}}``, repeated until a
   pass changes nothing so nested blocks resolve from the outside in.
2. Loops: ``{{#each path}}...{{/each}}``; each body is rendered again with
   the loop context.
3. Helpers: ``{{name:args}}``, dispatched to the HelperRegistry.
4. Variables: ``{{dotted.path}}``.

Block tags are paired by a scanner that tracks nesting depth, so an inner
``{{/if}}`` never closes the outer block. Unterminated blocks are left in the
output as they are.

Conditionals inside an ``{{#each}}`` body are not evaluated by step 1. They
are left for the render of each iteration, which sees the item's keys and
``@index``/``@first``/``@last``, instead of being decided once against the
outer context before the loop runs.

Key classes:
- TemplateEngine: Renders template strings against a render context.
- TemplateBlock: A located ``{{#if}}`` or ``{{#each}}`` block.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .context import loop_context
from .helpers import HelperRegistry, create_default_registry
from .protocols import HelperFunction
from .resolver import is_truthy, resolve_path, to_text

__all__ = ["TemplateBlock", "TemplateEngine", "find_blocks"]

_BLOCK_TOKENS = {
    "if": re.compile(
        r"\{\{(?:#if\s+(?P<arg>[^}]+)|(?P<else>#else)|(?P<close>/if))\}\}"
    ),
    "each": re.compile(r"\{\{(?:#each\s+(?P<arg>[^}]+)|(?P<close>/each))\}\}"),
}
_HELPER_RE = re.compile(r"\{\{([a-zA-Z0-9_]+):(.*?)\}\}")
_VARIABLE_RE = re.compile(r"\{\{(@?[a-zA-Z0-9_.]+)\}\}")


@dataclass(frozen=True)
class TemplateBlock:
    """A block tag pair located in a template.

    Attributes:
        start: Offset of the opening tag.
        end: Offset just past the closing tag.
        argument: Condition or loop path from the opening tag, stripped.
        body: Text between the opening tag and ``{{#else}}`` (or the closing tag).
        alternative: Text between ``{{#else}}`` and the closing tag.
    """

    start: int
    end: int
    argument: str
    body: str
    alternative: str = ""


def _inside(position: int, spans: Sequence[tuple[int, int]], starts: list[int]) -> bool:
    index = bisect_right(starts, position) - 1
    return index >= 0 and position < spans[index][1]


def find_blocks(
    template: str,
    keyword: str,
    exclude: Sequence[tuple[int, int]] = (),
) -> list[TemplateBlock]:
    """Locate the outermost ``keyword`` blocks of a template.

    Tags are paired in a single pass with a stack of open tags: a closing
    tag closes the most recent opener, an ``{{#else}}`` belongs to the
    innermost open block, and openers that are never closed are dropped.
    Nested pairs are then discarded in favour of the blocks around them.

    Args:
        template: Template text.
        keyword: ``if`` or ``each``.
        exclude: Sorted, non-overlapping (start, end) spans whose tags are
            ignored.

    Returns:
        Non-overlapping blocks in order of appearance.
    """
    pattern = _BLOCK_TOKENS[keyword]
    starts = [start for start, _ in exclude]
    # [start, body_start, argument, else span or None]
    stack: list[list[Any]] = []
    # (start, end, body_start, close_start, argument, else span or None)
    pairs: list[tuple[int, int, int, int, str, tuple[int, int] | None]] = []
    for match in pattern.finditer(template):
        if starts and _inside(match.start(), exclude, starts):
            continue
        if match.group("arg") is not None:
            stack.append([match.start(), match.end(), match.group("arg").strip(), None])
        elif match.groupdict().get("else"):
            if stack and stack[-1][3] is None:
                stack[-1][3] = (match.start(), match.end())
        elif stack:
            start, body_start, argument, else_tag = stack.pop()
            pairs.append((start, match.end(), body_start, match.start(), argument, else_tag))

    pairs.sort()
    blocks: list[TemplateBlock] = []
    for start, end, body_start, close_start, argument, else_tag in pairs:
        if blocks and start < blocks[-1].end:
            continue
        blocks.append(
            TemplateBlock(
                start=start,
                end=end,
                argument=argument,
                body=template[body_start : else_tag[0] if else_tag else close_start],
                alternative=template[else_tag[1] : close_start] if else_tag else "",
            )
        )
    return blocks


def _replace_blocks(
    template: str,
    blocks: Sequence[TemplateBlock],
    replacement: Callable[[TemplateBlock], str],
) -> str:
    pieces: list[str] = []
    position = 0
    for block in blocks:
        pieces.append(template[position : block.start])
        pieces.append(replacement(block))
        position = block.end
    pieces.append(template[position:])
    return "".join(pieces)


class TemplateEngine:
    """Renders StaticBlocks templates.

    The engine holds no per-render state; its helper registry is only
    modified during setup, so one engine can serve many renders.

    Attributes:
        helpers: Registry used to resolve ``{{name:args}}`` tags.
    """

    def __init__(self, helpers: HelperRegistry | None = None):
        """Initialize the engine.

        Args:
            helpers: Helper registry; defaults to the built-in helpers.
        """
        self.helpers = helpers if helpers is not None else create_default_registry()

    def register_helper(self, name: str, fn: HelperFunction) -> None:
        """Register a custom helper, replacing any helper of the same name."""
        self.helpers.register(name, fn)

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Render a template with a context.

        Args:
            template: Template text.
            context: Render context; it is never modified.

        Returns:
            Rendered text. Missing data renders as empty text and failing
            helpers leave their tag in place, so rendering always completes.
        """
        output = self._process_conditionals(template, context)
        output = self._process_loops(output, context)
        output = self._process_helpers(output, context)
        return self._process_variables(output, context)

    def _process_conditionals(self, template: str, context: Mapping[str, Any]) -> str:
        # Conditions inside loop bodies depend on the loop context, so they
        # are left for the recursive render of each iteration.
        output = template
        while True:
            loops = [(b.start, b.end) for b in find_blocks(output, "each")]
            blocks = find_blocks(output, "if", exclude=loops)
            if not blocks:
                return output
            rendered = _replace_blocks(
                output,
                blocks,
                lambda block: block.body
                if self._evaluate_condition(block.argument, context)
                else block.alternative,
            )
            if rendered == output:
                return output
            output = rendered

    def _process_loops(self, template: str, context: Mapping[str, Any]) -> str:
        return _replace_blocks(
            template,
            find_blocks(template, "each"),
            lambda block: self._expand_loop(block, context),
        )

    def _expand_loop(self, block: TemplateBlock, context: Mapping[str, Any]) -> str:
        items = resolve_path(context, block.argument)
        if not isinstance(items, (list, tuple)):
            return ""
        total = len(items)
        return "".join(
            self.render(block.body, loop_context(context, item, index, total))
            for index, item in enumerate(items)
        )

    def _process_helpers(self, template: str, context: Mapping[str, Any]) -> str:
        return _HELPER_RE.sub(
            lambda match: self.helpers.invoke(
                match.group(1), context, match.group(2), tag=match.group(0)
            ),
            template,
        )

    def _process_variables(self, template: str, context: Mapping[str, Any]) -> str:
        return _VARIABLE_RE.sub(
            lambda match: to_text(resolve_path(context, match.group(1))),
            template,
        )

    def _evaluate_condition(self, condition: str, context: Mapping[str, Any]) -> bool:
        if condition.startswith("!"):
            return not self._evaluate_condition(condition[1:], context)
        return is_truthy(resolve_path(context, condition.strip()))
