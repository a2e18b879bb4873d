"""
Scan the gallery folder and export the resolved catalog as JSON
(stdout, or --out FILE). Settings come from GALLERY_* env vars / .env.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import argparse, logging, sys

from gallery.config import load_config
from gallery.services.catalog_builder import CatalogBuilder

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--root", default="", help="gallery root (overrides GALLERY_DIR)")
    ap.add_argument("--price", type=float, default=None, help="default price")
    ap.add_argument("--out", dest="out", default="")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config()
    if args.root:
        cfg = cfg.with_overrides(root=Path(args.root))
    resp = CatalogBuilder(cfg).response(default_price=args.price)
    payload = resp.model_dump_json(indent=2)

    if not args.out:
        sys.stdout.write(payload + "\n")
        return 0
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(payload, encoding="utf-8")
    print(f"wrote {len(resp.items)} items → {out}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
