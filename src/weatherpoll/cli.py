"""Command-line entry point: gather run parameters, acquire, then export.

Values not given as options are prompted for interactively::

    Enter the IP address: 192.168.1.50
    Enter the zone of the panel: A1
    Enter the duration of the measurement in seconds (empty for no limit):

While a run is active, typing ``q`` followed by Enter stops it; closing the
live window does the same. The CSV and PNG files are written once the
acquisition thread has stopped.
"""

from __future__ import annotations

import argparse
import logging
import re
import signal
import sys
import threading
from pathlib import Path
from typing import Callable, Optional, Sequence, TextIO

from .config.runtime import PollerConfig, load_config
from .core.acquisition import AcquisitionLoop
from .core.cancellation import CancellationToken
from .core.models import RunSession
from .core.rendering import DirectRefresh, LogRenderer
from .core.sample_buffer import SampleBuffer
from .dataio import file_paths
from .dataio.exporter import ExportResult, export_session
from .remote.http_source import HttpSampleSource, endpoint_for
from .tools.debug import debug_enabled

logger = logging.getLogger(__name__)

IPV4_RE = re.compile(
    r"^((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

QUIT_COMMAND = "q"

InputFn = Callable[[str], str]


# ------------------------------------------------------------------ prompts
def is_valid_ip(address: str) -> bool:
    """Dotted-quad IPv4 check (each octet 0-255)."""
    return bool(IPV4_RE.match(address.strip()))


def _parse_duration(text: str) -> Optional[int]:
    """Return seconds, ``None`` for an empty answer; ValueError otherwise."""
    text = text.strip()
    if not text:
        return None
    seconds = int(text)
    if seconds <= 0:
        raise ValueError("duration must be a positive number of seconds")
    return seconds


def prompt_ip(input_fn: InputFn = input, err: TextIO | None = None) -> str:
    err = err or sys.stderr
    while True:
        address = input_fn("Enter the IP address: ").strip()
        if is_valid_ip(address):
            return address
        print("Invalid IP address format. Please try again.", file=err)


def prompt_zone(input_fn: InputFn = input, err: TextIO | None = None) -> str:
    err = err or sys.stderr
    while True:
        zone = input_fn("Enter the zone of the panel: ").strip()
        if zone:
            return zone
        print("Zone must not be empty.", file=err)


def prompt_duration(input_fn: InputFn = input, err: TextIO | None = None) -> Optional[int]:
    err = err or sys.stderr
    while True:
        answer = input_fn(
            "Enter the duration of the measurement in seconds (empty for no limit): "
        )
        try:
            return _parse_duration(answer)
        except ValueError:
            print("Invalid duration. Please enter a positive whole number.", file=err)


# ------------------------------------------------------------ quit listener
def start_quit_listener(
    token: CancellationToken,
    stream: TextIO | None = None,
    *,
    thread_name: str = "WeatherPollQuitListener",
) -> threading.Thread:
    """
    Watch ``stream`` (stdin by default) for a ``q`` line and cancel ``token``.

    The thread is a daemon and ends on EOF or after cancelling.
    """
    source = stream if stream is not None else sys.stdin

    def _target() -> None:
        for raw_line in source:
            if token.cancelled:
                return
            if raw_line.strip().lower() == QUIT_COMMAND:
                token.cancel("user abort")
                return

    thread = threading.Thread(target=_target, name=thread_name, daemon=True)
    thread.start()
    return thread


# --------------------------------------------------------------------- args
def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Poll a weather sensor page, plot it live and export CSV/PNG on exit"
    )
    parser.add_argument("--ip", help="Sensor IPv4 address (prompted when omitted)")
    parser.add_argument("--zone", help="Zone of the panel (prompted when omitted)")
    parser.add_argument(
        "--duration",
        help="Stop automatically after this many seconds (prompted when omitted)",
    )
    parser.add_argument(
        "--no-duration-prompt",
        action="store_true",
        help="Do not ask for a duration; run until stopped",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional YAML file with PollerConfig overrides",
    )
    parser.add_argument(
        "--output-root",
        type=Path,
        help="Folder that receives one sub-folder per zone",
    )
    parser.add_argument(
        "--no-gui",
        action="store_true",
        help="Run without the live window (log samples instead)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _resolve_config(args: argparse.Namespace) -> PollerConfig:
    cfg = load_config(args.config) if args.config else PollerConfig()
    if args.output_root is not None:
        cfg.output_root = str(args.output_root)
    if args.no_gui:
        cfg.gui_enabled = False
    return cfg.sanitized()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose or debug_enabled() else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------- run
def _report(result: ExportResult, out: TextIO) -> None:
    for path in result.written:
        print(f"Created: {path}", file=out)
    for exc in result.errors:
        print(f"Error: {exc}", file=out)


def _run_headless(loop: AcquisitionLoop) -> None:
    token = loop.cancel_token
    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGINT, lambda *_: token.cancel("interrupt"))
    try:
        loop.start()
        while not loop.join(timeout=0.5):
            pass
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def main(
    argv: Sequence[str] | None = None,
    *,
    input_fn: InputFn = input,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> int:
    out = out or sys.stdout
    parser = _build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)

    cfg = _resolve_config(args)

    address = args.ip.strip() if args.ip else ""
    if address and not is_valid_ip(address):
        print(f"Invalid IP address format: {address!r}", file=sys.stderr)
        address = ""
    address = address or prompt_ip(input_fn)
    zone = args.zone.strip() if args.zone and args.zone.strip() else prompt_zone(input_fn)
    duration: Optional[int] = None
    if args.duration is not None:
        try:
            duration = _parse_duration(args.duration)
        except ValueError:
            print(f"Invalid duration: {args.duration!r}", file=sys.stderr)
            duration = prompt_duration(input_fn)
    elif not args.no_duration_prompt:
        duration = prompt_duration(input_fn)

    zone_dir = file_paths.zone_directory(zone, file_paths.analysis_root(cfg.output_root))
    try:
        file_paths.ensure_directory(zone_dir)
    except OSError as exc:
        logger.error("Error creating directories: %s", exc)
        print(f"Error creating directories: {exc}", file=sys.stderr)
        return 1

    session = RunSession(zone=zone, output_directory=zone_dir, duration_limit=duration)
    buffer = SampleBuffer(cfg.buffer_capacity, pressure_half_span=cfg.pressure_half_span)
    token = CancellationToken()

    with HttpSampleSource(endpoint_for(address), timeout_s=cfg.request_timeout_s) as source:

        def build_loop(on_refresh, on_finished) -> AcquisitionLoop:
            return AcquisitionLoop(
                source,
                buffer,
                cancel_token=token,
                interval_s=cfg.poll_interval_s,
                duration_s=session.duration_limit,
                on_refresh=on_refresh,
                on_finished=on_finished,
            )

        print(f"Press '{QUIT_COMMAND}' and Enter to stop the measurement at any time.", file=out)
        start_quit_listener(token, stdin)

        if cfg.gui_enabled:
            from .gui.application import run_live_window

            loop = run_live_window(buffer, build_loop, cfg, title=f"Real-time Plotting - {zone}")
            loop.join()
        else:
            loop = build_loop(DirectRefresh(buffer, LogRenderer()), None)
            _run_headless(loop)

    logger.info(
        "Run finished (%s, limit %s); exporting %d samples",
        loop.stop_reason,
        "none" if session.duration_limit is None else f"{session.duration_limit} s",
        len(buffer),
    )
    result = export_session(buffer.snapshot(), session, cfg)
    _report(result, out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
