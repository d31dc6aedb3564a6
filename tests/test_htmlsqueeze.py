#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Functional test-suite for *htmlsqueeze*.

• Every rule toggle, observed through the public `minify` helper.
• Protected regions (comments, <script>, <style>, <textarea>, <pre>) kept
  byte-for-byte, including regions that straddle chunk boundaries.
• Chunk-boundary invariance: any split of the input, at byte or character
  level, yields the same output as a single chunk.
• StreamMinifier lifecycle (ACCUMULATING → FLUSHING → DONE), decoding
  errors, option validation and the `minify_stream` report.
"""
from __future__ import annotations

import io
import logging
import os
import sys
import unittest
from pathlib import Path
from typing import Iterable, List
from unittest.mock import patch

# Dynamically ensure the src tree is importable
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from htmlsqueeze import (  # noqa: E402
    ConfigurationError,
    MinifierOptions,
    MinifyReport,
    StreamMinifier,
    StreamState,
    iter_minify,
    minify,
    minify_stream,
)

# --------------------------------------------------------------------------- #
#  Fixtures                                                                   #
# --------------------------------------------------------------------------- #
PAGE = (
    "<!DOCTYPE html>\r\n"
    "<html lang=\"en\">\r\n"
    "  <head>\n"
    "    <meta   charset=\"utf-8\" >\n"
    "    <title>  Café   crème  </title>\n"
    "    <!-- build: 2024 -->\n"
    "    <style>\n      body { margin: 0 }\n    </style>\n"
    "    <!--[if lt IE 9]><script src=\"html5shiv.js\"></script><![endif]-->\n"
    "  </head>\n"
    "  <body>\n"
    "    <div   class=\"intro\"  data-x='a  b'>\n"
    "      <span>Hello</span>   <b>wörld</b>\n"
    "      text with > sign and a < b\n"
    "    </div>\n"
    "    <pre>\n  line one\n    line two\n</pre>\n"
    "    <textarea name=\"t\">  keep   me  </textarea>\n"
    "    <script>\n  if (a < b) { x = \"<!-- not a comment -->\"; }\n</script>\n"
    "    <p>end — ✓</p>\n"
    "  </body>\n"
    "</html>\n"
)

SMALL_DOCS = [
    "<div>\n    <span>Text</span>\n</div>\n",
    "before<!-- comment -->after",
    "<ul>\n  <li>a</li>\n  <!-- gone -->\n  <li>b</li>\n</ul>",
    "<p>a</p>\n<pre>\n  x  \n",
    "<p>x</p><script>var a = 1;\n</script>\n<p>y</p>",
    "  leading text <b>bold</b>   trailing  ",
    "lorem ipsum dolor  sit\n  amet  ",
    "<p>a</p>   <pre>x",
    "<script>a</script>\n<script>b</script>\n<style>c</style>\n",
    "<pre>x</pre><!-- c -->\n<b>y</b>",
    "--> <script><PRE><</script><!-->-->\n</b></pre>",
]


# --------------------------------------------------------------------------- #
#  Helpers                                                                    #
# --------------------------------------------------------------------------- #
def _run_chunks(chunks: Iterable, **options) -> str:
    """Feed *chunks* to a fresh StreamMinifier and return the whole output."""
    m = StreamMinifier(**options)
    out: List[str] = [m.feed(chunk) for chunk in chunks]
    out.append(m.flush())
    return "".join(out)


def _slices(data, size: int) -> list:
    return [data[i:i + size] for i in range(0, len(data), size)]


class HtmlSqueezeTestCase(unittest.TestCase):
    """Base class with a couple of convenience assertions."""

    def assertInvariantSplits(self, data, **options) -> None:
        expected = _run_chunks([data], **options)
        for i in range(1, len(data)):
            with self.subTest(offset=i):
                self.assertEqual(_run_chunks([data[:i], data[i:]], **options), expected)

    def assertUnchanged(self, doc: str, **options) -> None:
        self.assertEqual(minify(doc, **options), doc)


# --------------------------------------------------------------------------- #
#  1. Rules observed end to end                                               #
# --------------------------------------------------------------------------- #
class RuleBehaviourTests(HtmlSqueezeTestCase):
    def test_block_markup_shrinks(self) -> None:
        src = "<div>\n    <span>Text</span>\n</div>\n"
        out = minify(src)
        self.assertEqual(out, "<div> <span>Text</span></div>\n")
        self.assertLess(len(out), len(src))

    def test_comment_removed(self) -> None:
        self.assertEqual(minify("before<!-- comment -->after"), "beforeafter")

    def test_comment_kept_when_disabled(self) -> None:
        self.assertUnchanged("before<!-- comment -->after", strip_comments=False)
        self.assertUnchanged("before<!-- comment -->after", stripComments=False)

    def test_conditional_comment_kept(self) -> None:
        self.assertUnchanged("before<!--[if IE]>for ie only<![endif]-->after")

    def test_comment_between_block_elements(self) -> None:
        src = "<ul>\n  <li>a</li>\n  <!-- gone -->\n  <li>b</li>\n</ul>"
        self.assertEqual(minify(src), "<ul><li>a</li><li>b</li></ul>")
        self.assertEqual(
            minify(src, strip_comments=False),
            "<ul><li>a</li> <!-- gone --><li>b</li></ul>",
        )

    def test_attribute_whitespace_collapsed(self) -> None:
        self.assertEqual(minify('<img   src="a.png"  width="50">'), '<img src="a.png" width="50">')
        self.assertEqual(
            minify('<a title="a   b"   href="#" >x</a>'),
            '<a title="a   b" href="#">x</a>',
        )

    def test_normalize_disabled(self) -> None:
        self.assertUnchanged('<img   src="a.png"  width="50">', normalize_whitespace=False)
        self.assertEqual(
            minify("<span>a</span>\n\n   <span>b</span>", normalize_whitespace=False),
            "<span>a</span>\n\n<span>b</span>",
        )

    def test_inline_siblings_keep_one_space(self) -> None:
        self.assertEqual(minify("<span>a</span>\n\n   <span>b</span>"), "<span>a</span> <span>b</span>")

    def test_trim_lines(self) -> None:
        src = "<p>\n   hello   \n   world   \n</p>"
        self.assertEqual(minify(src), "<p> hello\nworld</p>")
        self.assertEqual(minify(src, trim_lines=False), "<p> hello   \n   world</p>")

    def test_trim_elements(self) -> None:
        src = "<div>\n  <p>x</p>\n</div>"
        self.assertEqual(minify(src), "<div><p>x</p></div>")
        self.assertEqual(minify(src, trim_elements=False), "<div> <p>x</p> </div>")

    def test_carriage_returns(self) -> None:
        self.assertEqual(minify("<p>a\r\nb</p>\r\n"), "<p>a\nb</p>\n")
        self.assertEqual(minify("<pre>a\r\nb</pre>"), "<pre>a\nb</pre>")
        self.assertUnchanged("<pre>a\r\nb</pre>", strip_carriage_returns=False)

    def test_everything_disabled_is_identity(self) -> None:
        opts = MinifierOptions(
            strip_carriage_returns=False,
            trim_lines=False,
            trim_elements=False,
            normalize_whitespace=False,
            strip_comments=False,
        )
        self.assertUnchanged("<div>\r\n  <p>  x  </p>\n  <!-- c -->\n</div>", options=opts)
        self.assertUnchanged("<div>\r\n  <span>  x  </span>\n</div>", options=opts)


# --------------------------------------------------------------------------- #
#  2. Protected regions                                                       #
# --------------------------------------------------------------------------- #
class ProtectedRegionTests(HtmlSqueezeTestCase):
    def test_pre_content_untouched(self) -> None:
        self.assertUnchanged("before<pre>foo\nbar\nbaz\n</pre>after")

    def test_whitespace_around_protected_elements_dropped(self) -> None:
        self.assertEqual(minify("<p>a\n  <pre> x </pre>\n  b</p>"), "<p>a<pre> x </pre>b</p>")

    def test_page_regions_survive(self) -> None:
        out = minify(PAGE)
        self.assertTrue(out.startswith("<!DOCTYPE html>"))
        self.assertNotIn("\r", out)
        self.assertNotIn("build: 2024", out)
        self.assertIn("<style>\n      body { margin: 0 }\n    </style>", out)
        self.assertIn('<!--[if lt IE 9]><script src="html5shiv.js"></script><![endif]-->', out)
        self.assertIn("<pre>\n  line one\n    line two\n</pre>", out)
        self.assertIn('<textarea name="t">  keep   me  </textarea>', out)
        self.assertIn('<script>\n  if (a < b) { x = "<!-- not a comment -->"; }\n</script>', out)

    def test_page_markup_normalized(self) -> None:
        out = minify(PAGE)
        self.assertIn('<meta charset="utf-8">', out)
        self.assertIn("<title> Café   crème</title>", out)
        self.assertIn("<div class=\"intro\" data-x='a  b'>", out)
        self.assertIn("<span>Hello</span> <b>wörld</b>", out)
        self.assertIn("<p>end — ✓</p>", out)

    def test_unclosed_region_flushed_verbatim(self) -> None:
        self.assertEqual(minify("<p>a</p>\n<pre>\n  x  \n"), "<p>a</p><pre>\n  x  \n")
        self.assertEqual(minify("<p>a</p>   <pre>x"), "<p>a</p><pre>x")
        self.assertUnchanged("<p>a</p><pre>x")
        self.assertUnchanged("<p>a</p><!-- never closed   \n")

    def test_whitespace_after_dropped_comment_behind_region(self) -> None:
        self.assertEqual(minify("<pre>x</pre><!-- c -->\n<b>y</b>"), "<pre>x</pre><b>y</b>")
        self.assertEqual(
            minify("<pre>x</pre> <!-- c --> <b>y</b>", strip_comments=False),
            "<pre>x</pre><!-- c --> <b>y</b>",
        )
        once = minify("--> <script><PRE><</script><!-->-->\n</b></pre>")
        self.assertEqual(once, "--><script><PRE><</script></b></pre>")
        self.assertEqual(minify(once), once)


# --------------------------------------------------------------------------- #
#  3. Chunk-boundary invariance                                               #
# --------------------------------------------------------------------------- #
class ChunkInvarianceTests(HtmlSqueezeTestCase):
    def test_every_byte_split_of_page(self) -> None:
        data = PAGE.encode("utf-8")
        self.assertInvariantSplits(data)

    def test_every_char_split_of_page(self) -> None:
        self.assertInvariantSplits(PAGE)

    def test_every_split_with_comments_kept(self) -> None:
        self.assertInvariantSplits(PAGE, strip_comments=False)

    def test_every_split_of_small_docs(self) -> None:
        for doc in SMALL_DOCS:
            with self.subTest(doc=doc):
                self.assertInvariantSplits(doc)

    def test_fixed_chunk_sizes(self) -> None:
        data = PAGE.encode("utf-8")
        expected = minify(PAGE)
        self.assertEqual(minify(data), expected)
        for size in (1, 2, 3, 5, 7, 64):
            with self.subTest(size=size):
                self.assertEqual(_run_chunks(_slices(data, size)), expected)
                self.assertEqual(_run_chunks(_slices(PAGE, size)), expected)

    def test_idempotent(self) -> None:
        for doc in [PAGE, *SMALL_DOCS]:
            with self.subTest(doc=doc[:20]):
                once = minify(doc)
                self.assertEqual(minify(once), once)

    def test_output_never_grows(self) -> None:
        for doc in [PAGE, *SMALL_DOCS]:
            with self.subTest(doc=doc[:20]):
                self.assertLessEqual(len(minify(doc)), len(doc))


# --------------------------------------------------------------------------- #
#  4. StreamMinifier                                                          #
# --------------------------------------------------------------------------- #
class StreamMinifierTests(HtmlSqueezeTestCase):
    def test_releases_up_to_last_non_whitespace(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed("<div>a</div><div>b  "), "<div>a</div><div>b")
        self.assertEqual(m.pending, 2)
        self.assertEqual(m.feed("</div>"), "</div>")
        self.assertEqual(m.flush(), "")

    def test_region_straddling_chunks(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed("<p>x</p><script>var a;\n"), "<p>x</p>")
        self.assertEqual(m.feed("</scr"), "")
        self.assertEqual(m.feed("ipt>\n<p>y</p>"), "<script>var a;\n</script><p>y</p>")
        self.assertEqual(m.flush(), "")

    def test_partial_start_tag_waits(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed("<p>a</p><pr"), "<p>a</p>")
        self.assertEqual(m.feed("e>  x  </pre>z"), "<pre>  x  </pre>z")
        self.assertEqual(m.flush(), "")

    def test_output_arrives_before_end_of_input(self) -> None:
        pieces = list(iter_minify(_slices(PAGE.encode("utf-8"), 64)))
        self.assertGreater(len(pieces), 1)
        self.assertEqual("".join(pieces), minify(PAGE))

    def test_consecutive_regions_stream_with_bounded_memory(self) -> None:
        chunks = [f"<script>var a{i} = 1;</script>\n" for i in range(2000)]
        m = StreamMinifier()
        out: List[str] = []
        for chunk in chunks:
            out.append(m.feed(chunk))
            self.assertLess(m.pending, 64)
            self.assertEqual(len(m._store), 0)
        self.assertEqual(out[1], "<script>var a0 = 1;</script>")
        out.append(m.flush())
        self.assertEqual("".join(out), minify("".join(chunks)))

    def test_tag_free_text_streams(self) -> None:
        m = StreamMinifier()
        pieces: List[str] = []
        for _ in range(200):
            pieces.append(m.feed("lorem ipsum "))
            self.assertEqual(m.pending, 1)
        self.assertTrue(all(pieces))
        pieces.append(m.flush())
        self.assertEqual("".join(pieces), ("lorem ipsum " * 200).rstrip())

    def test_empty_chunks(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed(""), "")
        self.assertEqual(m.feed(b""), "")
        self.assertEqual(m.flush(), "")

    def test_state_machine(self) -> None:
        m = StreamMinifier()
        self.assertIs(m.state, StreamState.ACCUMULATING)
        self.assertEqual(m.feed("<p>x"), "<p>x")
        self.assertIs(m.state, StreamState.ACCUMULATING)
        self.assertEqual(m.flush(), "")
        self.assertIs(m.state, StreamState.DONE)
        self.assertEqual(m.pending, 0)
        m.feed("<p>")
        self.assertIs(m.state, StreamState.ACCUMULATING)

    def test_flush_resets_placeholders(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed("<!--[if IE]>x<![endif]--><p>"), "<!--[if IE]>x<![endif]--><p>")
        self.assertEqual(m._store.counter, 1)
        m.flush()
        self.assertEqual(m._store.counter, 0)
        self.assertEqual(len(m._store), 0)

    def test_instance_is_reusable(self) -> None:
        m = StreamMinifier()
        first = m.feed(PAGE) + m.flush()
        second = m.feed(PAGE) + m.flush()
        self.assertEqual(first, second)

    def test_multibyte_character_split_across_chunks(self) -> None:
        m = StreamMinifier()
        self.assertEqual(m.feed(b"<p>caf\xc3"), "<p>caf")
        self.assertEqual(m.feed(bytearray(b"\xa9</p>")), "é</p>")
        self.assertEqual(m.flush(), "")

    def test_memoryview_chunk(self) -> None:
        self.assertEqual(_run_chunks([memoryview(b"<p>a</p>")]), "<p>a</p>")

    def test_invalid_utf8(self) -> None:
        with self.assertRaises(UnicodeDecodeError):
            StreamMinifier().feed(b"<p>\xff</p>")

    def test_truncated_utf8_at_flush(self) -> None:
        m = StreamMinifier()
        m.feed(b"<p>caf\xc3")
        with self.assertRaises(UnicodeDecodeError):
            m.flush()
        self.assertIs(m.state, StreamState.DONE)
        self.assertEqual(m.pending, 0)

    def test_accepts_logger_adapter(self) -> None:
        adapter = logging.LoggerAdapter(logging.getLogger("htmlsqueeze.adapter"), {})
        m = StreamMinifier(logger=adapter)
        self.assertEqual(m.feed("<div>\n  <p>x</p>\n</div>") + m.flush(), "<div><p>x</p></div>")

    def test_rejects_non_text_chunks(self) -> None:
        with self.assertRaises(TypeError):
            StreamMinifier().feed(42)  # type: ignore[arg-type]

    def test_trace_io(self) -> None:
        with patch.dict(os.environ, {"HTMLSQUEEZE_TRACE_IO": "1"}):
            with self.assertLogs("htmlsqueeze.driver", level="DEBUG") as cm:
                StreamMinifier().feed("<p>x</p>")
        self.assertTrue(any("chunk processed" in line for line in cm.output))


# --------------------------------------------------------------------------- #
#  5. Options                                                                 #
# --------------------------------------------------------------------------- #
class OptionTests(HtmlSqueezeTestCase):
    def test_defaults(self) -> None:
        opts = StreamMinifier().options
        self.assertEqual(opts, MinifierOptions())
        self.assertTrue(all(vars(opts).values()))

    def test_mapping_with_original_spelling(self) -> None:
        opts = StreamMinifier({"normalizeWhiteSpace": False, "trim_lines": False}).options
        self.assertFalse(opts.normalize_whitespace)
        self.assertFalse(opts.trim_lines)
        self.assertTrue(opts.strip_comments)

    def test_unknown_keys_ignored(self) -> None:
        self.assertEqual(StreamMinifier({"collapseEverything": True}).options, MinifierOptions())

    def test_overrides_on_instance(self) -> None:
        opts = StreamMinifier(MinifierOptions(strip_comments=False), trim_lines=False).options
        self.assertFalse(opts.strip_comments)
        self.assertFalse(opts.trim_lines)

    def test_non_boolean_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            StreamMinifier({"trimLines": "no"})
        with self.assertRaises(ConfigurationError):
            StreamMinifier(strip_comments=1)
        with self.assertRaises(ValueError):
            MinifierOptions(trim_elements=None)  # type: ignore[arg-type]

    def test_non_mapping_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            StreamMinifier(42)

    def test_replace(self) -> None:
        opts = MinifierOptions().replace(strip_comments=False)
        self.assertFalse(opts.strip_comments)
        with self.assertRaises(ConfigurationError):
            MinifierOptions().replace(strip_comments="off")


# --------------------------------------------------------------------------- #
#  6. Runner helpers                                                          #
# --------------------------------------------------------------------------- #
class RunnerTests(HtmlSqueezeTestCase):
    def test_iter_minify_skips_empty_pieces(self) -> None:
        self.assertEqual(
            list(iter_minify(["<div>a</div>", "<div>b</div>"])),
            ["<div>a</div>", "<div>b</div>"],
        )

    def test_minify_accepts_bytes(self) -> None:
        self.assertEqual(minify(PAGE.encode("utf-8")), minify(PAGE))

    def test_minify_stream_binary(self) -> None:
        data = PAGE.encode("utf-8")
        dst = io.StringIO()
        report = minify_stream(io.BytesIO(data), dst, chunk_size=7)
        self.assertIsInstance(report, MinifyReport)
        self.assertEqual(dst.getvalue(), minify(PAGE))
        self.assertEqual(report.size_in, len(data))
        self.assertEqual(report.chunks_in, -(-len(data) // 7))
        self.assertEqual(report.chars_out, len(dst.getvalue()))
        self.assertGreaterEqual(report.chunks_out, 1)

    def test_minify_stream_text(self) -> None:
        dst = io.StringIO()
        minify_stream(io.StringIO(PAGE), dst, chunk_size=5, options={"stripComments": False})
        self.assertEqual(dst.getvalue(), minify(PAGE, strip_comments=False))

    def test_minify_stream_empty_input(self) -> None:
        dst = io.StringIO()
        report = minify_stream(io.BytesIO(b""), dst)
        self.assertEqual(dst.getvalue(), "")
        self.assertEqual(report, MinifyReport(size_in=0, chars_out=0, chunks_in=0, chunks_out=0))

    def test_minify_stream_rejects_bad_chunk_size(self) -> None:
        with self.assertRaises(ValueError):
            minify_stream(io.BytesIO(b"x"), io.StringIO(), chunk_size=0)


if __name__ == "__main__":
    unittest.main()
