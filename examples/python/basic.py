#!/usr/bin/env python3
"""Basic key derivation with lavarand.

Animates the lava simulation for a moment, derives one of each output
type, and prints the capture log.

Usage:
    pip install -e .
    python examples/python/basic.py
"""

import time

from lavarand import KeyGenerator
from lavarand.sources.lava import LavaSource

source = LavaSource(320, 240)
gen = KeyGenerator(source)

with source.animate(fps=60):
    time.sleep(0.5)
    hex_key = gen.generate("hex")
    uuid = gen.generate("uuid")
    dice = gen.generate("int", (1, 6))

print(f"256-bit key: {hex_key.key}")
print(f"UUID v4:     {uuid.key}")
print(f"Dice roll:   {dice.key}")
print(f"\nLast digest: {gen.last_digest}")

print(f"\nCapture log ({len(gen.log)} items, newest first):")
for rec in gen.log:
    print(f"  {rec.kind.value.upper():<5} {rec.timestamp:%H:%M:%S}  seed {rec.seed_preview}  {rec.key}")
