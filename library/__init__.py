"""
Library store package.

This package contains:
- Author and Book document schemas
- MongoDB connection handle with readiness tracking
- Fixture seeding routine
"""

__version__ = "1.0.0"
