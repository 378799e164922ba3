"""
Utility functions module.

Symbol normalization and clock helpers shared across the access layer.

Clock Semantics:
- Cache freshness is measured on a monotonic clock, never wall-clock time
- Clocks are injected as zero-argument callables so tests can substitute them
"""
