#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path

from conceptsite.config import CONTENT_DIR, PREFIX, SiteConfig, load_site_config
from conceptsite.menu import normalize_path
from conceptsite.pages import PageIndex, load_pages, page_url


def _source_for(pages: PageIndex, url: str, content_dir: Path) -> str:
    for page in pages:
        if page_url(page.slug) == url:
            try:
                return page.source.relative_to(content_dir.parent).as_posix()
            except ValueError:
                return page.source.as_posix()
    return "(no page)"


def format_dashboard(config: SiteConfig, pages: PageIndex, content_dir: Path) -> str:
    lines: list[str] = [f"{PREFIX} Dashboard: {config.title}"]
    lines.append(f"{PREFIX} Menu")
    menu_urls = set()
    for index, entry in enumerate(config.menu, start=1):
        url = normalize_path(entry.path)
        menu_urls.add(url)
        lines.append(f"{PREFIX} {index}. {entry.label} {url} -> {_source_for(pages, url, content_dir)}")

    unlisted = [page for page in pages if page_url(page.slug) not in menu_urls]
    if unlisted:
        lines.append(f"{PREFIX} Pages not in the menu")
        for page in unlisted:
            lines.append(f"{PREFIX} - {page_url(page.slug)} ({page.title})")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show which content file backs each menu entry.")
    parser.add_argument("--content", type=Path, default=CONTENT_DIR)
    args = parser.parse_args(argv)

    config = load_site_config(args.content)
    pages = load_pages(args.content)
    print(format_dashboard(config, pages, args.content))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
