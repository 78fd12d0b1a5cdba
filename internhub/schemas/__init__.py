"""
Schemas module - Request/Response schemas for API endpoints.

Request schemas validate every write before it reaches the store;
response schemas are the typed rows handed back to clients.
"""
