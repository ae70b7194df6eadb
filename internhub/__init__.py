"""
InternHub API
A REST API for companies and the internships they post.

Architecture:
- MongoDB: company documents with embedded internships
- Geocoding provider: address -> coordinates for radius search
- JWT authentication for publisher routes
"""

__version__ = "1.0.0"
