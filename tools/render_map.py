#!/usr/bin/env python3
# Render exported TSV maps to PNG previews using Pillow.
# One flat colour per block type; no tile assets.

import argparse, glob, os
from PIL import Image

from goresgen.export import import_map
from goresgen.tiles import BlockType

COLORS = {
    BlockType.SOLID:      ( 40,  40,  40, 255),
    BlockType.EMPTY:      (  0,   0,   0,   0),
    BlockType.HOOKABLE:   (150, 120,  90, 255),
    BlockType.UNHOOKABLE: (110, 110, 130, 255),
    BlockType.FREEZE:     ( 20,  20,  60, 220),
    BlockType.PLATFORM:   (230, 230, 230, 255),
    BlockType.DEBUG:      (255,   0, 255, 255),
}


def render_map(tsv_path, out_png, cell=4):
    rows = import_map(tsv_path).as_rows()
    h, w = len(rows), len(rows[0])
    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    img.putdata([COLORS.get(t, (255, 0, 0, 255)) for row in rows for t in row])
    if cell > 1:
        img = img.resize((w * cell, h * cell), Image.NEAREST)
    out_dir = os.path.dirname(out_png)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    img.save(out_png)
    return out_png


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("inputs", nargs="+", help="TSV files or glob patterns")
    ap.add_argument("--outdir", type=str, default="out/png", help="Where to write PNGs")
    ap.add_argument("--cell", type=int, default=4, help="Pixels per cell")
    args = ap.parse_args()

    paths = [p for pattern in args.inputs for p in sorted(glob.glob(pattern))]
    for tsv in paths:
        name = os.path.splitext(os.path.basename(tsv))[0]
        render_map(tsv, os.path.join(args.outdir, f"{name}.png"), cell=args.cell)
    print(f"Wrote {len(paths)} PNGs to {args.outdir}")


if __name__ == "__main__":
    main()
