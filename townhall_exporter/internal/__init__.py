"""
Internal application code.
"""
