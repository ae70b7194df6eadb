"""
Core module - configuration, errors and authentication.
"""
