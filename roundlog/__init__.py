"""roundlog: consolidation and rollup engine for practice-session logs."""

__version__ = "0.1.0"
