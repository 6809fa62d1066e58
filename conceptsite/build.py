#!/usr/bin/env python3
from __future__ import annotations

import argparse
import html
import re
import shutil
from dataclasses import replace
from pathlib import Path

import markdown

from conceptsite.config import CONTENT_DIR, PREFIX, SITE_DIR, SiteConfig, load_site_config, normalize_prepath
from conceptsite.helpers import RenderContext, expand_helpers, expand_markdown_helpers
from conceptsite.pages import INDEX_SLUG, Page, PageIndex, load_pages

LAYOUT_PATH = Path("_layout") / "page.html"
ASSETS_SOURCE = Path("_assets")
ASSETS_TARGET = Path("assets")
CONTENT_SLOT = "{{content}}"

DEFAULT_LAYOUT = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{page_title}} | {{site_title}}</title>
  <meta name="description" content="{{description}}" />
  <link rel="stylesheet" href="/assets/style.css" />
</head>
<body>
  <header>
    <nav class="menu">
      <ul class="menu-list">
        {{menu_items_list}}
      </ul>
    </nav>
  </header>
  <main class="content">
{{content}}
  </main>
  <footer>{{site_title}}</footer>
</body>
</html>
"""

ROOT_LINK_PATTERN = re.compile(r"""((?:href|src)=["'])/(?!/)""", re.IGNORECASE)

md = markdown.Markdown(
    extensions=[
        "tables",
        "fenced_code",
        "toc",
        "attr_list",
    ],
)


def _escape(text: str) -> str:
    return html.escape(text or "", quote=True)


def _page_output_path(slug: str) -> Path:
    if slug == INDEX_SLUG:
        return Path("index.html")
    if slug.endswith(f"/{INDEX_SLUG}"):
        return Path(slug).parent / "index.html"
    return Path(slug) / "index.html"


def _output_paths(pages: PageIndex) -> dict[str, Path]:
    outputs: dict[str, Path] = {}
    claimed: dict[Path, str] = {}
    for page in pages:
        path = _page_output_path(page.slug)
        if path in claimed:
            raise SystemExit(f"Pages {claimed[path]} and {page.slug} both render to {path.as_posix()}")
        claimed[path] = page.slug
        outputs[page.slug] = path
    return outputs


def _read_layout(content_dir: Path, layout: Path | None = None) -> str:
    if layout is not None:
        if not layout.is_file():
            raise SystemExit(f"Missing layout: {layout}")
        return layout.read_text(encoding="utf-8")
    layout = content_dir / LAYOUT_PATH
    if layout.exists():
        return layout.read_text(encoding="utf-8")
    return DEFAULT_LAYOUT


def apply_prepath(doc: str, prepath: str) -> str:
    """Prefix root-relative ``href``/``src`` values with the site's base path."""
    prepath = normalize_prepath(prepath)
    if not prepath:
        return doc
    return ROOT_LINK_PATTERN.sub(rf"\g<1>/{prepath}/", doc)


def convert_markdown(text: str) -> str:
    md.reset()
    return md.convert(text)


def render_page(page: Page, layout: str, config: SiteConfig, pages: PageIndex) -> str:
    context = RenderContext(config=config, pages=pages, page=page)
    body_html = convert_markdown(expand_markdown_helpers(page.body, context))

    doc = layout.replace("{{site_title}}", _escape(config.title))
    doc = doc.replace("{{page_title}}", _escape(page.title))
    doc = doc.replace("{{description}}", _escape(page.vars.get("description") or config.description))
    before, slot, after = doc.partition(CONTENT_SLOT)
    doc = expand_helpers(before, context)
    if slot:
        doc += body_html + expand_helpers(after, context)
    return apply_prepath(doc, config.prepath)


def _copy_assets(content_dir: Path, site_dir: Path) -> None:
    source = content_dir / ASSETS_SOURCE
    if source.is_dir():
        shutil.copytree(source, site_dir / ASSETS_TARGET)


def build_site(
    content_dir: Path = CONTENT_DIR,
    site_dir: Path = SITE_DIR,
    prepath: str | None = None,
    layout: Path | None = None,
) -> int:
    if not content_dir.is_dir():
        raise SystemExit(f"Missing content directory: {content_dir}")
    config = load_site_config(content_dir)
    if prepath is not None:
        config = replace(config, prepath=normalize_prepath(prepath))
    pages = load_pages(content_dir)
    template = _read_layout(content_dir, layout)
    outputs = _output_paths(pages)

    if site_dir.exists():
        shutil.rmtree(site_dir)
    site_dir.mkdir(parents=True, exist_ok=True)
    _copy_assets(content_dir, site_dir)

    count = 0
    for page in pages:
        doc = render_page(page, template, config, pages)
        output_path = site_dir / outputs[page.slug]
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(doc, encoding="utf-8")
        print(f"{PREFIX}   {output_path.relative_to(site_dir).as_posix()}")
        count += 1
    return count


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build the static site from content/.")
    parser.add_argument("--content", type=Path, default=CONTENT_DIR, help="Content directory (default: ./content).")
    parser.add_argument("--output", type=Path, default=SITE_DIR, help="Output directory (default: ./site).")
    parser.add_argument("--prepath", default=None, help="Base path to publish under, overrides site.json.")
    parser.add_argument("--layout", type=Path, default=None, help="Layout template, overrides content/_layout/page.html.")
    args = parser.parse_args(argv)

    print(f"{PREFIX} Building {args.content} -> {args.output}")
    count = build_site(args.content, args.output, prepath=args.prepath, layout=args.layout)
    print(f"{PREFIX} Built {count} pages.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
