"""
Tactician - Best-first decision engine for turn-based games.

A generic A*-family search engine that plans a whole turn for a
non-player seat. The engine is parameterized over State, Action and
Cost and is driven by five injected policies:
- Action enumeration
- Goal testing
- Heuristic estimation
- Action weighing
- Action application

Games plug in as domain adapters; the session host and API run
decisions for AI seats and expose search introspection for debugging.
"""

__version__ = "0.1.0"
