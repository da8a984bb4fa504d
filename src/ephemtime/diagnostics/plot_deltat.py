#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "ephemtime[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "ephemtime[diagnostics]"') from e


def year_to_jd(y: float) -> float:
    """Gregorian epoch year -> JD, the inverse of the Delta-T year argument."""
    return 2451545.0 + (y - 2000.0) * 365.2425


def sample_delta_t(engine, years):
    """Delta-T in seconds at each epoch year."""
    np = _need_numpy()
    return np.array([engine.delta_t(year_to_jd(float(y))) * 86400.0 for y in years], dtype=float)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="ephemtime plot-deltat", description="Plot Delta T (ET - UT) from ephemtime.reference.deltat.")
    p.add_argument("--y0", type=int, default=1600, help="start year")
    p.add_argument("--y1", type=int, default=2100, help="end year")
    p.add_argument("--step", type=float, default=0.25, help="sampling step in years (e.g., 0.1, 0.25, 1.0)")
    p.add_argument("--out", default="deltat.png", help="output image filename")
    p.add_argument("--show-em", action="store_true", help="also plot the Espenak-Meeus 2006 curve")
    p.add_argument("--show-table", action="store_true", help="scatter the yearly table points")
    args = p.parse_args(argv)

    if args.y1 < args.y0:
        raise SystemExit("--y1 must be >= --y0")
    if args.step <= 0:
        raise SystemExit("--step must be > 0")

    np = _need_numpy()
    plt = _need_matplotlib()

    import ephemtime
    from ephemtime.reference.deltat import DeltaTEngine

    eng = ephemtime.get_delta_t_engine()
    eng.initialize()

    ys = np.arange(float(args.y0), float(args.y1) + 1e-12, float(args.step), dtype=float)
    best = sample_delta_t(eng, ys)
    logger.info("sampled %d points in %g..%g", len(ys), args.y0, args.y1)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(ys, best, linewidth=2, label="table + Morrison-Stephenson")

    if args.show_em:
        em = DeltaTEngine(
            eng.source,
            tidal_acceleration=eng.tidal_acceleration,
            use_espenak_meeus_2006=True,
            table=eng.table,
        )
        em_vals = sample_delta_t(em, ys)
        ax.plot(ys, em_vals, linewidth=1.5, linestyle="--", label="Espenak-Meeus 2006")

    if args.show_table:
        tbl = eng.table
        y_tbl = np.arange(tbl.start_year, tbl.end_year + 1, dtype=float)
        mask = (y_tbl >= args.y0) & (y_tbl <= args.y1)
        ax.scatter(y_tbl[mask], np.array(tbl.values, dtype=float)[mask], s=8, alpha=0.6, label="yearly table")

    ax.set_title("Delta T = ET - UT (seconds)")
    ax.set_xlabel("Year")
    ax.set_ylabel("ΔT (s)")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(args.out, dpi=200)
    print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
