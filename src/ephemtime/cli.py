from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import os
import re
import sys
from dataclasses import replace
from typing import Optional

from .core.errors import EphemTimeError
from .core.types import CalendarDate, CalendarSystem

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^(-?\d+)-(\d{1,2})-(\d{1,2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or EPHEMTIME_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get("EPHEMTIME_LOG", "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_date(s: str, t: Optional[str]) -> CalendarDate:
    m = _DATE_RE.match(s.strip())
    if m is None:
        raise SystemExit(f"bad date {s!r}; expected YYYY-MM-DD (negative years allowed)")
    hh = mm = ss = 0
    if t:
        mt = _TIME_RE.match(t.strip())
        if mt is None:
            raise SystemExit(f"bad time {t!r}; expected HH:MM[:SS]")
        hh, mm = int(mt.group(1)), int(mt.group(2))
        ss = int(mt.group(3) or 0)
    return CalendarDate(int(m.group(1)), int(m.group(2)), int(m.group(3)), hh, mm, ss)


def _calendar(name: Optional[str]) -> Optional[CalendarSystem]:
    return CalendarSystem(name) if name else None


def _add_calendar_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--calendar",
        choices=[c.value for c in CalendarSystem],
        default=None,
        help="calendar (default: Gregorian from 1582-10-15, Julian before)",
    )


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def cmd_jd(argv: list[str]) -> int:
    import ephemtime

    p = argparse.ArgumentParser(prog="ephemtime jd", description="Calendar date -> Julian Day (UT)")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("--time", default=None, help="HH:MM[:SS] (default 00:00:00)")
    _add_calendar_arg(p)
    args = p.parse_args(argv)

    d = _parse_date(args.date, args.time)
    jd = ephemtime.julian_day_from_date(d, _calendar(args.calendar))
    print(f"{jd:.6f}")
    return 0


def cmd_date(argv: list[str]) -> int:
    import ephemtime

    p = argparse.ArgumentParser(prog="ephemtime date", description="Julian Day -> calendar date")
    p.add_argument("jd", type=float)
    p.add_argument("--format", default=None, help="date pattern (default dd/MM/yyyy HH:mm:ss)")
    _add_calendar_arg(p)
    args = p.parse_args(argv)

    jd = ephemtime.JulianDay(args.jd, _calendar(args.calendar))
    d = ephemtime.date_from_julian_day(jd)
    print(f"{d.format(args.format)} ({jd.calendar})")
    return 0


def cmd_deltat(argv: list[str]) -> int:
    import ephemtime
    from .reference.deltat import DeltaTEngine

    p = argparse.ArgumentParser(prog="ephemtime deltat", description="Delta-T (ET - UT) at a Julian Day")
    p.add_argument("jd", type=float)
    p.add_argument("--espenak-meeus", action="store_true", help="use the Espenak-Meeus 2006 polynomials")
    p.add_argument("--tidal", type=float, default=None, help="tidal acceleration of the Moon (arcsec/cy^2)")
    args = p.parse_args(argv)

    base = ephemtime.get_delta_t_engine()
    eng = base
    if args.espenak_meeus or args.tidal is not None:
        eng = DeltaTEngine(
            base.source,
            tidal_acceleration=base.tidal_acceleration if args.tidal is None else args.tidal,
            use_espenak_meeus_2006=args.espenak_meeus or base.use_espenak_meeus_2006,
        )

    dt = eng.delta_t(args.jd)
    print(f"JD       = {args.jd:.6f}")
    print(f"regime   = {eng.regime(args.jd)}")
    print(f"delta_t  = {dt * 86400.0:.4f} s")
    print(f"         = {dt:.10f} d")
    return 0


def cmd_et(argv: list[str]) -> int:
    import ephemtime

    p = argparse.ArgumentParser(prog="ephemtime et", description="Ephemeris Time (JD + Delta-T)")
    p.add_argument("jd", type=float)
    args = p.parse_args(argv)

    et = ephemtime.ephemeris_time(args.jd)
    print(f"{et.value:.8f}")
    return 0


def cmd_obliquity(argv: list[str]) -> int:
    import ephemtime
    from .core.formatting import format_as_degrees
    from .reference import precession as pr

    p = argparse.ArgumentParser(prog="ephemtime obliquity", description="Mean obliquity of the ecliptic")
    p.add_argument("jd", type=float, help="Julian Day (TT)")
    p.add_argument("--iau", choices=[m.value for m in pr.PrecessionIAU], default=None)
    p.add_argument("--coefficient", choices=[m.value for m in pr.PrecessionCoefficients], default=None)
    g = p.add_mutually_exclusive_group()
    g.add_argument("--horizons", action="store_true", help="JPL Horizons mode")
    g.add_argument("--approximate", action="store_true", help="JPL Horizons approximate mode")
    args = p.parse_args(argv)

    cfg = ephemtime.get_settings().precession
    if args.iau is not None:
        cfg = replace(cfg, use_precession_iau=pr.PrecessionIAU(args.iau))
    if args.coefficient is not None:
        cfg = replace(cfg, use_precession_coefficient=pr.PrecessionCoefficients(args.coefficient))

    mode = pr.JplHorizonMode.NONE
    if args.horizons:
        mode = pr.JplHorizonMode.JPL_HORIZONS
    elif args.approximate:
        mode = pr.JplHorizonMode.JPL_APPROXIMATE

    eps = pr.obliquity_degrees(args.jd, mode, cfg)
    print(f"model     = {pr.obliquity_model(args.jd, mode, cfg)}")
    print(f"obliquity = {eps:.10f} deg")
    print(f"          = {format_as_degrees(eps)}")
    return 0


def cmd_weekday(argv: list[str]) -> int:
    import ephemtime

    p = argparse.ArgumentParser(prog="ephemtime weekday", description="Day of week of a Julian Day")
    p.add_argument("jd", type=float)
    args = p.parse_args(argv)

    print(ephemtime.day_of_week(args.jd))
    return 0


_COMMANDS = {
    "jd": cmd_jd,
    "date": cmd_date,
    "deltat": cmd_deltat,
    "et": cmd_et,
    "obliquity": cmd_obliquity,
    "weekday": cmd_weekday,
}


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="ephemtime", description="Astronomical time toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="Show DEBUG logs")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("jd", help="Calendar date -> Julian Day", add_help=False)
    sub.add_parser("date", help="Julian Day -> calendar date", add_help=False)
    sub.add_parser("deltat", help="Delta-T at a Julian Day", add_help=False)
    sub.add_parser("et", help="Ephemeris Time at a Julian Day", add_help=False)
    sub.add_parser("obliquity", help="Mean obliquity of the ecliptic", add_help=False)
    sub.add_parser("weekday", help="Day of week of a Julian Day", add_help=False)

    # diagnostics (need the [diagnostics] extra)
    sub.add_parser("plot-deltat", help="Plot Delta-T over a year range (diagnostics)", add_help=False)

    args, rest = p.parse_known_args(argv)
    _configure_logging(verbose=args.verbose)

    try:
        if args.cmd == "plot-deltat":
            return _run_module_main("ephemtime.diagnostics.plot_deltat", rest)
        return _COMMANDS[args.cmd](rest)
    except EphemTimeError as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
