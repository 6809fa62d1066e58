#!/usr/bin/env python3
from __future__ import annotations

import argparse
import re
import urllib.parse
from pathlib import Path

from conceptsite.config import CONTENT_DIR, PREFIX, SITE_DIR, load_site_config, normalize_prepath

HREF_PATTERN = re.compile(r'(?:href|src)=["\']([^"\']+)["\']', re.IGNORECASE)


def _is_internal_link(url: str) -> bool:
    if url.startswith(("#", "mailto:", "tel:", "//")):
        return False
    return not urllib.parse.urlparse(url).scheme


def _strip_prepath(url: str, prepath: str) -> str:
    if not prepath:
        return url
    prefix = f"/{prepath}"
    if url == prefix or url.startswith(prefix + "/"):
        return url[len(prefix):] or "/"
    return url


def _target_exists(site_dir: Path, source_file: Path, url: str) -> bool:
    """
    Checks if the link target exists inside the built site.
    Root-relative links resolve against the site dir, others against the
    linking file. Query strings and fragments are ignored.
    """
    url_clean = urllib.parse.unquote(url.split("?")[0].split("#")[0])
    if not url_clean:
        return True

    if url_clean.startswith("/"):
        target_path = site_dir / url_clean.lstrip("/")
    else:
        target_path = source_file.parent / url_clean

    if target_path.is_dir():
        return (target_path / "index.html").exists()
    return target_path.exists()


def find_broken_links(site_dir: Path, prepath: str = "") -> list[tuple[Path, str]]:
    prepath = normalize_prepath(prepath)
    broken: list[tuple[Path, str]] = []
    for path in sorted(site_dir.rglob("*.html")):
        text = path.read_text(encoding="utf-8", errors="ignore")
        for url in HREF_PATTERN.findall(text):
            url = url.strip()
            if not _is_internal_link(url):
                continue
            if not _target_exists(site_dir, path, _strip_prepath(url, prepath)):
                broken.append((path, url))
    return broken


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check internal links of the built site.")
    parser.add_argument("--content", type=Path, default=CONTENT_DIR)
    parser.add_argument("--output", type=Path, default=SITE_DIR)
    parser.add_argument("--prepath", default=None, help="Base path the site was built with, overrides site.json.")
    args = parser.parse_args(argv)

    if not args.output.exists():
        print(f"{PREFIX} {args.output} not found. Run conceptsite-build first.")
        return 1

    prepath = args.prepath
    if prepath is None:
        prepath = load_site_config(args.content).prepath

    broken_links = find_broken_links(args.output, prepath)
    if broken_links:
        print(f"{PREFIX} Broken internal links found:")
        for path, url in broken_links:
            print(f"  {path.relative_to(args.output).as_posix()}: {url}")
        return 1

    print(f"{PREFIX} Link verification passed. No broken internal links found.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
