"""intelsearch -- hybrid search orchestration for the analyst console.

Turns the console's filter state into hybrid-search requests, normalizes
heterogeneous structured/vector hits into uniform result cards, derives
facets and suggestions, and degrades to a synthetic dataset whenever the
backend is unavailable.
"""

__version__ = "0.1.0"
