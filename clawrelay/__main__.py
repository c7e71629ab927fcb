"""Command-line entry point: `python -m clawrelay <command>`."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
from dataclasses import asdict

import orjson
import uvicorn

from clawrelay.errors import RelayError
from clawrelay.state import AttachmentRef
from clawrelay.monitor import CostEstimator
from clawrelay.runtime import load_settings, configure_logging
from clawrelay.relay.router import RelayRouter

logger = logging.getLogger(__name__)


def _print_json(data: object) -> None:
    print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def _attachment_from_path(path: str) -> AttachmentRef:
    name = path.rstrip("/").rsplit("/", 1)[-1]
    suffix = name.rsplit(".", 1)[-1].lower() if "." in name else "file"
    return AttachmentRef(file_name=name, path=path, type_label=suffix)


def _cmd_send(args: argparse.Namespace) -> int:
    router = RelayRouter(load_settings().relay)
    request = router.build_request(args.text, [_attachment_from_path(p) for p in args.attach])
    try:
        result = asyncio.run(router.send(request))
    except RelayError as exc:
        print(f"error ({exc.kind}): {exc}", file=sys.stderr)
        return 1

    if args.json:
        _print_json(asdict(result))
    else:
        print(result.text)
    return 0


def _cmd_diagnostics(_args: argparse.Namespace) -> int:
    router = RelayRouter(load_settings().relay)
    report = asyncio.run(router.diagnostics())
    _print_json(asdict(report))
    return 0 if report.reachable else 1


def _cmd_rates(args: argparse.Namespace) -> int:
    estimator = CostEstimator(load_settings().costs)
    print(estimator.describe())
    if args.stt_seconds is not None:
        print(f"STT {args.stt_seconds:g}s: {estimator.stt_estimate(args.stt_seconds):.6f} USD")
    if args.tts_chars is not None:
        cost = estimator.tts_estimate(args.tts_chars, args.tts_model)
        print(f"TTS {args.tts_chars} chars ({args.tts_model or 'default'}): {cost:.6f} USD")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    server = load_settings().server
    uvicorn.run(
        "clawrelay.server:app",
        host=args.host or server.host,
        port=args.port or server.port,
        log_config=None,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clawrelay", description="Relay turns to an agent service")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="Send one turn and print the reply")
    send.add_argument("text", type=str, help="Message text")
    send.add_argument("--attach", action="append", default=[], metavar="PATH", help="Attach a file (repeatable)")
    send.add_argument("--json", action="store_true", help="Print the full result as JSON")
    send.set_defaults(func=_cmd_send)

    diagnostics = sub.add_parser("diagnostics", help="Probe the configured transport")
    diagnostics.set_defaults(func=_cmd_diagnostics)

    rates = sub.add_parser("rates", help="Show cost assumptions and estimate a call")
    rates.add_argument("--stt-seconds", type=float, default=None, help="Estimate an STT call of this duration")
    rates.add_argument("--tts-chars", type=int, default=None, help="Estimate a TTS call of this many characters")
    rates.add_argument("--tts-model", type=str, default="", help="TTS model name (selects the pricing tier)")
    rates.set_defaults(func=_cmd_rates)

    serve = sub.add_parser("serve", help="Run the HTTP surface with uvicorn")
    serve.add_argument("--host", type=str, default=None, help="Bind host (overrides CLAWRELAY_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (overrides CLAWRELAY_PORT)")
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
