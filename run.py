#!/usr/bin/env python3
"""
Metronome Engine - headless runner

Plays the metronome on a Qt event loop from the command line and prints
each beat as it is published. Also exposes the cache maintenance commands.
"""

import argparse
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from config import MAX_BPM, MIN_BPM
from config_persistence import load_config
from logging_utils import log_event, set_log_level
from metronome_engine import MetronomeEngine
from time_signature import all_signatures, find_time_signature


def _bpm_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if not MIN_BPM <= value <= MAX_BPM:
        raise argparse.ArgumentTypeError(f"BPM must be within {MIN_BPM}-{MAX_BPM}")
    return value


def _signature_arg(text: str):
    try:
        return find_time_signature(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _duration_arg(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("duration must be positive")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the metronome engine")
    parser.add_argument("--bpm", type=_bpm_arg, default=None,
                        help=f"Tempo in beats per minute ({MIN_BPM}-{MAX_BPM})")
    parser.add_argument("--signature", type=_signature_arg, default=None,
                        help='Time signature: catalog name ("waltz") or "beats/note" ("7/8")')
    parser.add_argument("--duration", type=_duration_arg, default=None,
                        help="Stop after this many seconds (default: run until Ctrl+C)")
    parser.add_argument("--list-signatures", action="store_true",
                        help="Print the predefined time signatures and exit")
    parser.add_argument("--cache-size", action="store_true",
                        help="Print the size of the audio cache in bytes and exit")
    parser.add_argument("--clear-cache", action="store_true",
                        help="Delete cached click sounds and exit")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG/INFO/WARNING/ERROR (default: from config)")
    return parser


def print_beat(engine: MetronomeEngine):
    """Listener that prints one line per click."""
    def on_change(field, value):
        if field != "beat":
            return
        signature = engine.time_signature
        marker = ">" if value == 0 else " "
        print(f"{marker} {value + 1}/{signature.beats}  ({engine.bpm} BPM)", flush=True)
    return on_change


def run_app(args, engine: MetronomeEngine) -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    # Let Python see SIGINT while Qt owns the loop
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    wakeup = QTimer()
    wakeup.timeout.connect(lambda: None)
    wakeup.start(200)

    engine.subscribe(print_beat(engine))
    if args.duration is not None:
        QTimer.singleShot(int(args.duration * 1000), app.quit)

    engine.start()
    try:
        return app.exec()
    finally:
        wakeup.stop()
        engine.shutdown()


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    config = load_config()
    set_log_level(args.log_level or config.log_level)

    if args.list_signatures:
        for sig in all_signatures():
            print(sig)
        sys.exit(0)

    engine = MetronomeEngine(config)

    if args.cache_size or args.clear_cache:
        if args.clear_cache and not engine.clear_audio_cache():
            sys.exit(1)
        print(engine.get_cache_size())
        sys.exit(0)

    if args.bpm is not None:
        engine.set_bpm(args.bpm)
    if args.signature is not None:
        engine.set_time_signature(args.signature)

    log_event("INFO", "Run", "Starting", bpm=engine.bpm, signature=engine.time_signature.description)
    sys.exit(run_app(args, engine))


if __name__ == "__main__":
    main()
