#!/usr/bin/env python3
"""Basic usage example for Sigil.

Demonstrates encoding an id into a marker, decoding it from a rendered
canonical image at each rotation, and locking onto it over a simulated
stream of frames.

Usage:
    python examples/basic_usage.py
"""

import logging
import os
import sys

import structlog

# Add parent directory to path for direct script execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sigil.decoder import SigilDecoder
from sigil.encoder import encode, pattern_to_str
from sigil.extractor import ArraySampler
from sigil.renderer import render_array, render_svg
from sigil.rotation import capture_rotated
from sigil.scanner import SigilScanner

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
)


def example_encode_decode():
    """Encode an id and decode it back at every rotation."""
    print("=" * 60)
    print("Example 1: Encode / Decode at 0, 120 and 240 degrees")
    print("=" * 60)

    sigil_id = 317
    pattern = encode(sigil_id)
    print(f"  Id:       {sigil_id}")
    print("  Pattern:")
    print(pattern_to_str(pattern))

    decoder = SigilDecoder()
    for hypothesis, mapping in enumerate(decoder.rotation_maps.maps):
        captured = capture_rotated(pattern, mapping) if hypothesis else pattern
        result = decoder.decode_sampler(ArraySampler(render_array(captured)))
        if result is None:
            print(f"  hypothesis {hypothesis}: no result")
            continue
        print(
            f"  Captured at {result.rotation:3d} deg -> id {result.sigil_id} "
            f"(contrast {result.contrast:.0f})"
        )
    print()


def example_lock():
    """Feed a short frame stream with a dropout and a stray misread."""
    print("=" * 60)
    print("Example 2: Confirmation and lock")
    print("=" * 60)

    scanner = SigilScanner()
    good = ArraySampler(render_array(encode(42)))
    stray = ArraySampler(render_array(encode(43)))

    stream = [good, good, None, good, good, stray, good, good, good]
    for frame_no, frame in enumerate(stream):
        now = frame_no / 30
        report = scanner.process_miss(now) if frame is None else scanner.process_frame(frame, now)
        seen = report.result.sigil_id if report.result else "-"
        print(f"  frame {frame_no}: read {seen!s:>3}  status {report.status.label}")

    print(f"  After 6s idle: {scanner.tracker.tick(now=len(stream) / 30 + 6.0).label}")
    print()


def example_svg():
    """Render a printable SVG marker."""
    print("=" * 60)
    print("Example 3: SVG marker")
    print("=" * 60)

    svg = render_svg(encode(7), size=400)
    print(f"  SVG length: {len(svg)} chars")
    print()


if __name__ == "__main__":
    example_encode_decode()
    example_lock()
    example_svg()
