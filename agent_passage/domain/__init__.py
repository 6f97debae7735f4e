"""Domain layer for Agent Passage.

Markers, policies and the pure services that evaluate them. Nothing in
this package performs I/O or reads the wall clock.
"""
