# tests/property/__init__.py
"""Property-based tests for modelize.

Test categories:
- round-trip law for every static field type
- schema compilation and raw construction invariants
- collection bookkeeping (stateful)
- serialization gating by validator state
"""
