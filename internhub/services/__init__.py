"""
Services module - query translation, storage access and business rules.
"""
