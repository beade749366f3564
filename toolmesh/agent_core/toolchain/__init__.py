"""Fixed-topology tool chains.

The chained pipeline answers a query without a planner: it searches, opens the
first hit in a browser and extracts content from the opened page.
"""

from .pipeline import ChainedPipeline

__all__ = ["ChainedPipeline"]
