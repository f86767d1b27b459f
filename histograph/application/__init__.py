"""
Application layer: orchestration over the storage adapters.
"""
