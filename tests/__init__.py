"""
Engine Test Package

TEST AXIOMS:
=============
1. Determinism: same graph + same inputs = identical output
2. Fail-soft: recoverable errors come back as data, never as crashes
3. Cycle safety: no traversal loops on cyclic boards
"""
