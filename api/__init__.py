"""
FastAPI RESTful API for the Library service.

This module provides a read-only REST API for:
- Listing authors and looking them up by id
- Listing the books of an author
- Listing books with their author resolved inline
"""
