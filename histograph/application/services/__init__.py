"""
Application services.

Exports:
  - MutationRouter: Routes mutation records to the relational and document adapters
  - RouteResult: Per-backend outcome of a routed record
"""

from histograph.application.services.mutation_router import MutationRouter, RouteResult

__all__ = ["MutationRouter", "RouteResult"]
