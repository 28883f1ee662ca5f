"""Bounded contexts of the remediation recovery engine.

- Shared kernel: records exchanged with the scanner, agent and executor
- Snapshot: pre-fix markup and rollback
- Recovery: selector fuzzy matching, verification and executor failures
- Specialists: per-violation fix planning and confidence
- Safety: destructive-change detection
- Report: terminal dispositions per session
"""
