"""
Schemas module - request schemas for API endpoints.

Responses are plain envelopes built by internhub.api.responses.
"""
