# Builds every stale or missing preview up front so the first page view is fast
from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import argparse, logging, sys

from gallery.config import load_config
from gallery.services.preview_cache import PreviewCache
from gallery.services.scanner import scan

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate <item>.preview.jpg for every gallery item")
    ap.add_argument("--root", default="", help="gallery root (overrides GALLERY_DIR)")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config()
    if args.root:
        cfg = cfg.with_overrides(root=Path(args.root))
    cache = PreviewCache.from_config(cfg)

    ok = missing = 0
    for item in scan(cfg.root):
        if cache.ensure_item(item):
            ok += 1
        else:
            missing += 1
    print(f"Previews ready: {ok}, without preview: {missing} ({cache.transformer.name})")
    return 0

if __name__ == "__main__":
    sys.exit(main())
