"""Counting of physical page reads."""

import sys
from dataclasses import dataclass


@dataclass
class Statistics:
    """Read statistics; reads are only counted while collection is on."""

    collect: bool = False
    pg_reads: int = 0

    def on(self):
        """Start collecting statistics."""
        self.collect = True

    def off(self):
        """Stop collecting statistics."""
        self.collect = False

    def record_read(self):
        """Count one physical page read if collection is on."""
        if self.collect:
            self.pg_reads += 1

    def dump(self, out=None):
        """Write the collected statistics to ``out`` (standard output by default)."""
        stream = sys.stdout if out is None else out
        stream.write(f"Physical Page Reads: {self.pg_reads}\n")