"""Format-aware expansion engine.

Resolves the catalog of packaging variables for one distribution format.
Resolution is pure: the same (format, name, version) always yields the same
table, and the catalog is never mutated.
"""
