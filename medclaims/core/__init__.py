"""
Shared enumerations.
"""
