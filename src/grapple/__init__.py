"""Grapple: a turn-based Brazilian jiu-jitsu match engine.

Subpackages:
- models: Catalog vocabulary, position/technique tables and match state
- engine: Turn resolution, endings and the match state machine
- opponents: Heuristic and baseline AI opponents
- testing: Headless match and batch simulation runners
"""

__version__ = "0.1.0"
