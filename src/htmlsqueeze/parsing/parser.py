# htmlsqueeze/parsing/parser.py
from __future__ import annotations

import argparse

from htmlsqueeze.constants import DEFAULT_CHUNK_SIZE


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid integer: {raw!r}') from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f'must be a positive integer: {raw!r}')
    return value


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser.

    Notes:
        - Every rule is enabled by default; flags only switch rules off.
        - Chunk size and logging format can also come from the environment
          (HTMLSQUEEZE_CHUNK_SIZE, HTMLSQUEEZE_JSON_LOGS); flags win.
    """
    p = argparse.ArgumentParser(
        prog='htmlsqueeze',
        formatter_class=argparse.RawTextHelpFormatter,
        usage='%(prog)s [INPUT] [-o OUTPUT] [OPTIONS]',
        description=(
            'htmlsqueeze – streaming HTML whitespace minifier\n'
            'Reads INPUT (or stdin) chunk by chunk and writes the minified '
            'document as soon as each part is final.'
        ),
    )

    g_io = p.add_argument_group('Input & output')
    g_rules = p.add_argument_group('Rules')
    g_stream = p.add_argument_group('Streaming')
    g_misc = p.add_argument_group('Miscellaneous')

    # -----------------------
    # Input & output
    # -----------------------
    g_io.add_argument(
        'input',
        nargs='?',
        default='-',
        metavar='INPUT',
        help="HTML file to minify. Defaults to stdin ('-').",
    )
    g_io.add_argument(
        '-o',
        '--output',
        metavar='FILE',
        dest='output',
        default='-',
        help="Write the result to FILE instead of stdout ('-').",
    )

    # -----------------------
    # Rules
    # -----------------------
    g_rules.add_argument(
        '--keep-comments',
        action='store_true',
        dest='keep_comments',
        help='Keep every HTML comment. Conditional comments are always kept.',
    )
    g_rules.add_argument(
        '--keep-carriage-returns',
        action='store_true',
        dest='keep_carriage_returns',
        help='Do not delete \\r characters.',
    )
    g_rules.add_argument(
        '--no-trim-lines',
        action='store_true',
        dest='no_trim_lines',
        help='Keep leading and trailing whitespace of each line.',
    )
    g_rules.add_argument(
        '--no-trim-elements',
        action='store_true',
        dest='no_trim_elements',
        help='Keep whitespace in front of block-level and non-rendered elements.',
    )
    g_rules.add_argument(
        '--no-normalize',
        action='store_true',
        dest='no_normalize',
        help='Do not collapse whitespace between and inside tags to single spaces.',
    )

    # -----------------------
    # Streaming
    # -----------------------
    g_stream.add_argument(
        '--chunk-size',
        metavar='N',
        type=_positive_int,
        dest='chunk_size',
        default=None,
        help=f'Read N bytes per chunk (default {DEFAULT_CHUNK_SIZE}).',
    )

    # -----------------------
    # Miscellaneous
    # -----------------------
    g_misc.add_argument(
        '--json-logs',
        action='store_true',
        dest='json_logs',
        help='Emit logs as JSON lines on stderr.',
    )
    g_misc.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        dest='verbose',
        help='Log debug information.',
    )
    g_misc.add_argument(
        '--version',
        action='store_true',
        dest='show_version',
        help='Print the version and exit.',
    )
    return p
