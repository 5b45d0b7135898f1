"""Hotword rule sets supplied as data.

Rule sets live in ``config/rulesets/*.yaml`` or arrive as plain mappings
from a caller, either in the flat shape used by this package or in the
inspection service's nested ``ruleSet`` shape.
"""
