from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable

from conceptsite.config import PREFIX, SiteConfig
from conceptsite.menu import render_menu
from conceptsite.pages import INDEX_SLUG, Page, PageIndex, page_identifier

HELPER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)((?:\s+[^{}\s]+)*)\s*\}\}")
FENCE_PATTERN = re.compile(r"^[ ]{0,3}(`{3,}|~{3,}).*?(?:^[ ]{0,3}\1[ \t]*$|\Z)", re.MULTILINE | re.DOTALL)


@dataclass(frozen=True)
class NumberParse:
    value: float | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.value is not None

    def __bool__(self) -> bool:
        return self.ok


def parse_number(text: str) -> NumberParse:
    cleaned = (text or "").strip()
    if not cleaned:
        return NumberParse(error="empty input")
    try:
        value = float(cleaned)
    except ValueError:
        return NumberParse(error=f"not a number: {cleaned!r}")
    if not math.isfinite(value):
        return NumberParse(error=f"not a finite number: {cleaned!r}")
    return NumberParse(value=value)


def rounded_sqrt(text: str) -> NumberParse:
    parsed = parse_number(text)
    if not parsed:
        return parsed
    if parsed.value < 0:
        return NumberParse(error=f"square root of negative number: {text.strip()!r}")
    return NumberParse(value=round(math.sqrt(parsed.value), 2))


def uppercase(text: str) -> str:
    return (text or "").upper()


def index_var_fill(pages: PageIndex, name: str) -> str:
    value = pages.var(INDEX_SLUG, name)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class RenderContext:
    config: SiteConfig
    pages: PageIndex
    page: Page

    @property
    def current_page(self) -> str:
        return page_identifier(self.page)


def _menu_items_list(context: RenderContext, args: list[str]) -> str | None:
    return render_menu(context.config.menu, context.current_page)


def _bar(context: RenderContext, args: list[str]) -> str | None:
    result = rounded_sqrt(args[0] if args else "")
    if not result:
        print(f"{PREFIX} Warning: {{{{bar}}}} in {context.page.slug}: {result.error}")
        return None
    return str(result.value)


def _upper(context: RenderContext, args: list[str]) -> str | None:
    return uppercase(" ".join(args))


def _missing_argument(context: RenderContext, name: str) -> None:
    print(f"{PREFIX} Warning: {{{{{name}}}}} in {context.page.slug}: missing variable name")


def _fill(context: RenderContext, args: list[str]) -> str | None:
    if not args:
        _missing_argument(context, "fill")
        return None
    return index_var_fill(context.pages, args[0])


def _pagevar(context: RenderContext, args: list[str]) -> str | None:
    if not args:
        _missing_argument(context, "pagevar")
        return None
    value = context.pages.var(context.page.slug, args[0])
    return "" if value is None else str(value)


HELPERS: dict[str, Callable[[RenderContext, list[str]], str | None]] = {
    "menu_items_list": _menu_items_list,
    "bar": _bar,
    "upper": _upper,
    "fill": _fill,
    "pagevar": _pagevar,
}


def expand_helpers(text: str, context: RenderContext) -> str:
    """
    Replace ``{{name arg ...}}`` calls with the output of the matching helper.

    Calls that cannot be expanded are left in the output untouched.
    """
    def replace(match: re.Match) -> str:
        name = match.group(1)
        args = match.group(2).split()
        helper = HELPERS.get(name)
        if helper is None:
            print(f"{PREFIX} Warning: unknown helper {{{{{name}}}}} in {context.page.slug}")
            return match.group(0)
        output = helper(context, args)
        if output is None:
            return match.group(0)
        return output

    return HELPER_PATTERN.sub(replace, text)


def expand_markdown_helpers(text: str, context: RenderContext) -> str:
    """Like :func:`expand_helpers`, but fenced code blocks are copied verbatim."""
    parts: list[str] = []
    last = 0
    for match in FENCE_PATTERN.finditer(text):
        parts.append(expand_helpers(text[last:match.start()], context))
        parts.append(match.group(0))
        last = match.end()
    parts.append(expand_helpers(text[last:], context))
    return "".join(parts)
