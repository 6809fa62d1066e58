#!/usr/bin/env python3
from __future__ import annotations

import argparse
import functools
import http.server
from pathlib import Path

from conceptsite.build import build_site
from conceptsite.config import CONTENT_DIR, PREFIX, SITE_DIR

PORT = 8000


def serve(site_dir: Path, port: int = PORT) -> None:
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))
    httpd = http.server.ThreadingHTTPServer(("localhost", port), handler)
    url = f"http://localhost:{port}/"
    print(f"{PREFIX} Serving {url} (site dir: {site_dir})")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print(f"{PREFIX} Shutting down server.")
    finally:
        httpd.server_close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build and serve the site locally.")
    parser.add_argument("--once", action="store_true", help="Build once and exit without serving.")
    parser.add_argument("--content", type=Path, default=CONTENT_DIR)
    parser.add_argument("--output", type=Path, default=SITE_DIR)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    # Served from the root locally.
    count = build_site(args.content, args.output, prepath="")
    print(f"{PREFIX} Build complete ({count} pages). Preview at http://localhost:{args.port}/")
    if args.once:
        return 0
    if not args.output.exists():
        print(f"{PREFIX} {args.output} missing after build.")
        return 1
    serve(args.output, args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
