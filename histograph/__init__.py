"""
Histograph storage layer.

Replicates PIT and relation mutation records into a relational bookkeeping
store and a document/search index.
"""

__version__ = "0.1.0"
