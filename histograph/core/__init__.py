"""
Core domain layer: token vocabulary and exception hierarchy.
"""
