from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import IO, Any, NoReturn, Optional, Sequence

from htmlsqueeze.constants import DEFAULT_CHUNK_SIZE
from htmlsqueeze.core.interfaces.logging import LoggerFactoryProtocol
from htmlsqueeze.core.models import MinifierOptions, MinifyReport
from htmlsqueeze.logging.factory import DefaultLoggerFactory
from htmlsqueeze.logging.helpers import get_logger
from htmlsqueeze.parsing.parser import _build_parser
from htmlsqueeze.runtime.runner import minify_stream

logger = get_logger('htmlsqueeze')


def _configure_logging(enable_json: bool, verbose: bool = False) -> None:
    """Configure process-wide logging once per mode, either JSON or plain text."""
    mode = (bool(enable_json), bool(verbose))
    prev = getattr(_configure_logging, '_configured_mode', None)
    if prev is not None and prev == mode:
        return
    factory: LoggerFactoryProtocol = DefaultLoggerFactory(
        json_logs=enable_json,
        level=logging.DEBUG if verbose else logging.INFO,
        replace=prev is not None,
    )
    global logger
    logger = factory.get_logger('htmlsqueeze')
    setattr(_configure_logging, '_configured_mode', mode)


def _fatal(msg: str, code: int = 1) -> NoReturn:
    """Exit the process with a logged error."""
    logger.error(msg)
    sys.exit(code)


def options_from_namespace(ns: argparse.Namespace) -> MinifierOptions:
    """Map CLI switches onto MinifierOptions."""
    return MinifierOptions(
        strip_carriage_returns=not ns.keep_carriage_returns,
        trim_lines=not ns.no_trim_lines,
        trim_elements=not ns.no_trim_elements,
        normalize_whitespace=not ns.no_normalize,
        strip_comments=not ns.keep_comments,
    )


def _resolve_chunk_size(ns: argparse.Namespace) -> int:
    if ns.chunk_size is not None:
        return ns.chunk_size
    raw = (os.getenv('HTMLSQUEEZE_CHUNK_SIZE') or '').strip()
    if not raw:
        return DEFAULT_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError:
        _fatal(f'invalid HTMLSQUEEZE_CHUNK_SIZE {raw!r}')
    if value <= 0:
        _fatal(f'HTMLSQUEEZE_CHUNK_SIZE must be positive, got {value}')
    return value


class HtmlSqueeze:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(
        argv: Sequence[str],
        *,
        stdin: Optional[IO[Any]] = None,
        stdout: Optional[IO[str]] = None,
    ) -> Optional[MinifyReport]:
        """Run the tool with an argv-like sequence; returns None for --version."""
        ns = _build_parser().parse_args(list(argv))
        json_logs = ns.json_logs or os.getenv('HTMLSQUEEZE_JSON_LOGS') == '1'
        _configure_logging(json_logs, ns.verbose)

        out_stream = stdout or sys.stdout
        if ns.show_version:
            from htmlsqueeze import __version__

            out_stream.write(f'htmlsqueeze {__version__}\n')
            return None

        options = options_from_namespace(ns)
        chunk_size = _resolve_chunk_size(ns)

        if ns.input == '-':
            src = stdin or getattr(sys.stdin, 'buffer', sys.stdin)
            return HtmlSqueeze._run_to(ns.output, src, out_stream, options, chunk_size)

        if not os.path.isfile(ns.input):
            _fatal(f'input file {ns.input} not found')
        with open(ns.input, 'rb') as src:
            return HtmlSqueeze._run_to(ns.output, src, out_stream, options, chunk_size)

    @staticmethod
    def _run_to(
        output: str,
        src: IO[Any],
        out_stream: IO[str],
        options: MinifierOptions,
        chunk_size: int,
    ) -> MinifyReport:
        if output == '-':
            report = minify_stream(src, out_stream, options=options, chunk_size=chunk_size, logger=logger)
            out_stream.flush()
        else:
            with open(output, 'w', encoding='utf-8', newline='') as dst:
                report = minify_stream(src, dst, options=options, chunk_size=chunk_size, logger=logger)
            logger.info('✔ %s written (%d chars)', output, report.chars_out)
        return report


def main() -> NoReturn:
    """Entry point for the `htmlsqueeze` console script."""
    try:
        HtmlSqueeze.run(sys.argv[1:])
        raise SystemExit(0)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except UnicodeDecodeError as exc:
        logger.error('✘ input is not valid UTF-8: %s', exc)
        raise SystemExit(1)
    except Exception as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
