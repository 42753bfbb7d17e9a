"""
Quote Computation Engine.

Pure Python math. No I/O, no AI, no hidden state.
Given a JobConfiguration, a RateTable and resolved reference data,
produce a QuoteBreakdown. Stages run strictly in data-flow order:
sizing -> crew & duration -> travel & stay -> transport -> aggregation.
"""

from .quote_engine import QuoteEngine, calculate_quote

__all__ = ["QuoteEngine", "calculate_quote"]
