from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from conceptsite.menu import MenuEntry

BASE_DIR = Path.cwd()
CONTENT_DIR = BASE_DIR / "content"
SITE_DIR = BASE_DIR / "site"
SITE_JSON_NAME = "site.json"
PREFIX = "[site]"

DEFAULTS: dict[str, Any] = {
    "title": "Language Concepts",
    "author": "",
    "description": "Notes on programming-language concepts",
    "prepath": "",
    "menubar_items": [["Home", ""]],
}


@dataclass(frozen=True)
class SiteConfig:
    title: str
    author: str
    description: str
    prepath: str
    menu: tuple[MenuEntry, ...]
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def normalize_prepath(raw: str) -> str:
    return (raw or "").strip().strip("/")


def _parse_menu(raw_items: Any) -> tuple[MenuEntry, ...]:
    if not isinstance(raw_items, list):
        raise SystemExit(f"menubar_items must be a list of [label, path] pairs, got {type(raw_items).__name__}")
    entries: list[MenuEntry] = []
    for position, item in enumerate(raw_items, start=1):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise SystemExit(f"menubar_items[{position}] must be a [label, path] pair: {item!r}")
        label, path = item
        if not isinstance(label, str) or not label.strip():
            raise SystemExit(f"menubar_items[{position}] has an empty or non-string label: {item!r}")
        if not isinstance(path, str):
            raise SystemExit(f"menubar_items[{position}] has a non-string path: {item!r}")
        entries.append(MenuEntry(label=label, path=path.strip().strip("/")))
    return tuple(entries)


def _read_site_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise SystemExit(f"{path} must contain a JSON object")
    return raw


def load_site_config(content_dir: Path = CONTENT_DIR) -> SiteConfig:
    config = _read_site_json(content_dir / SITE_JSON_NAME)

    for key, val in DEFAULTS.items():
        if key not in config:
            config[key] = val

    extra = {key: val for key, val in config.items() if key not in DEFAULTS}
    return SiteConfig(
        title=str(config["title"]),
        author=str(config["author"]),
        description=str(config["description"]),
        prepath=normalize_prepath(str(config["prepath"])),
        menu=_parse_menu(config["menubar_items"]),
        extra=MappingProxyType(extra),
    )
