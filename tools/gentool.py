#!/usr/bin/env python3
# Command-line host for goresgen: runs generation ticks, exports TSV maps.

import argparse, logging, os
from dataclasses import replace

from goresgen.config import MapGenerationConfig, load_config, load_layout
from goresgen.export import export_map
from goresgen.mapgen.generator import generate_map
from goresgen.rng import generate_seeds


def _load(args):
    config = load_config(args.config) if args.config else MapGenerationConfig()
    layout = load_layout(args.layout)
    return config, layout


def _progress(every):
    last = 0

    def report(gen):
        nonlocal last
        if every and gen.step_count - last >= every:
            last = gen.step_count
            print(f"  step {gen.step_count}: pos={gen.walker.position} "
                  f"waypoint {gen.walker.target_index + 1}/{len(gen.layout.waypoints)}")
    return report


def _run_one(config, layout, outdir, args):
    gen = generate_map(config, layout, iterations_per_update=args.ticks,
                       on_update=_progress(args.progress))
    path = os.path.join(outdir, f"{gen.map_name}.tsv")
    export_map(gen.grid, path, include_header=args.header)
    state = "finished" if gen.is_finished else "budget spent"
    print(f"Wrote {path} ({gen.step_count} steps, {state})")
    return path


def cmd_emit(args):
    config, layout = _load(args)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    _run_one(config, layout, args.outdir, args)


def cmd_batch(args):
    config, layout = _load(args)
    for seed in generate_seeds(args.count):
        _run_one(replace(config, seed=seed), layout, args.outdir, args)
    print(f"Wrote {args.count} maps to {args.outdir}")


def main():
    p = argparse.ArgumentParser()
    p.add_argument('--verbose', '-v', action='store_true')
    sub = p.add_subparsers(dest='cmd', required=True)
    for name, func in (('emit', cmd_emit), ('batch', cmd_batch)):
        sp = sub.add_parser(name)
        sp.add_argument('--config', type=str, default=None, help="Generation config JSON")
        sp.add_argument('--layout', type=str, required=True, help="Waypoint layout JSON")
        sp.add_argument('--outdir', type=str, default="out/maps")
        sp.add_argument('--ticks', type=int, default=200, help="Steps per host tick")
        sp.add_argument('--progress', type=int, default=0, help="Print progress every N steps")
        sp.add_argument('--header', action='store_true')
        sp.set_defaults(func=func)
        if name == 'emit':
            sp.add_argument('--seed', type=int, default=None, help="Override the config seed")
        else:
            sp.add_argument('--count', type=int, required=True)
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    args.func(args)


if __name__ == '__main__':
    main()
