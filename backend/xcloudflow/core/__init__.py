"""Core — pure StackFlow pipeline: load, overlay, normalize, validate, compile.

Invariants:
    - No IO, no async, no DB in this package (repository_protocols only declares contracts)
    - All modules operate on immutable Document nodes
"""
