from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Sequence

ITEM_INDENT = " " * 8
ITEM_CLASS = "menu-list-item"
LINK_CLASS = "menu-list-link"
ACTIVE_CLASS = "active"


@dataclass(frozen=True)
class MenuEntry:
    label: str
    path: str = ""


def _escape(text: str) -> str:
    return html.escape(text or "", quote=True)


def normalize_path(raw_path: str) -> str:
    path = raw_path or ""
    if len(path) <= 1:
        return "/"
    return f"/{path}/"


def is_active(label: str, current_page: str) -> bool:
    """True when ``current_page`` is ``label`` itself or any sub-path of it."""
    if not current_page:
        return False
    return current_page == label or current_page.startswith(f"{label}/")


def _class_attr(base: str, active: bool) -> str:
    return f"{base} {ACTIVE_CLASS}" if active else base


def render_menu(entries: Sequence[MenuEntry], current_page: str) -> str:
    """
    Render the nav bar list items for ``entries``.

    Items after the first are indented to line up with the surrounding
    layout markup; items are newline separated with no trailing newline.
    """
    parts: list[str] = []
    last = len(entries)
    for index, entry in enumerate(entries, start=1):
        active = is_active(entry.label, current_page)
        href = normalize_path(entry.path)
        item = (
            f"<li class=\"{_class_attr(ITEM_CLASS, active)}\">"
            f"<a href=\"{_escape(href)}\" class=\"{_class_attr(LINK_CLASS, active)}\"> {_escape(entry.label)}</a>"
        )
        if index > 1:
            item = ITEM_INDENT + item
        if index < last:
            item += "\n"
        parts.append(item)
    return "".join(parts)
