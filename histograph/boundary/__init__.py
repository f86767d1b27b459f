"""
Boundary layer for external system integrations.

Handles all interactions with the two persistence backends: the relational
bookkeeping store (histograph.boundary.db) and the document/search index
(histograph.boundary.docstore). The two adapters never call each other.
"""
