from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

INDEX_SLUG = "index"

HEADING_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Page:
    slug: str
    source: Path
    title: str
    vars: dict[str, str] = field(default_factory=dict)
    body: str = ""


def _slug_for(path: Path, content_dir: Path) -> str:
    return path.relative_to(content_dir).with_suffix("").as_posix()


def _split_front_matter(raw: str) -> tuple[dict[str, str], str]:
    if not raw.startswith("---"):
        return {}, raw
    parts = re.split(r"^---\s*$", raw, maxsplit=2, flags=re.MULTILINE)
    if len(parts) < 3:
        return {}, raw
    front_matter: dict[str, str] = {}
    for line in parts[1].splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        if key:
            front_matter[key] = value.strip().strip('"').strip("'")
    return front_matter, parts[2].lstrip("\n")


def parse_page(path: Path, content_dir: Path) -> Page:
    raw = path.read_text(encoding="utf-8").replace("\r\n", "\n")
    page_vars, body = _split_front_matter(raw)
    title = page_vars.get("title", "")
    if not title:
        heading = HEADING_PATTERN.search(body)
        title = heading.group(1) if heading else path.stem.replace("-", " ").replace("_", " ").title()
    return Page(
        slug=_slug_for(path, content_dir),
        source=path,
        title=title,
        vars=page_vars,
        body=body,
    )


def page_url(slug: str) -> str:
    if slug in {"", INDEX_SLUG}:
        return "/"
    if slug.endswith(f"/{INDEX_SLUG}"):
        slug = slug[: -len(INDEX_SLUG) - 1]
    return f"/{slug}/"


def page_identifier(page: Page) -> str:
    """Identifier compared against menu labels to pick the active nav item."""
    return page.vars.get("menu") or page.title


class PageIndex:
    def __init__(self, pages: list[Page]):
        self._pages = {page.slug: page for page in pages}

    def __iter__(self) -> Iterator[Page]:
        for slug in sorted(self._pages):
            yield self._pages[slug]

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, slug: object) -> bool:
        return slug in self._pages

    def get(self, slug: str) -> Page | None:
        return self._pages.get(slug)

    def var(self, slug: str, name: str, default: Any = None) -> Any:
        page = self._pages.get(slug)
        if page is None:
            return default
        if name == "title":
            return page.title
        return page.vars.get(name.lower(), default)


def _is_hidden(path: Path, content_dir: Path) -> bool:
    return any(part.startswith("_") for part in path.relative_to(content_dir).parts[:-1])


def load_pages(content_dir: Path) -> PageIndex:
    if not content_dir.exists():
        return PageIndex([])
    pages = [
        parse_page(path, content_dir)
        for path in sorted(content_dir.rglob("*.md"))
        if not _is_hidden(path, content_dir)
    ]
    return PageIndex(pages)
