"""
Pydantic schema definitions for API payloads.

Each domain defines its own Pydantic models for request and response
bodies.  Schemas are separated from the stored JSON records so that the
API representation can evolve independently of persistence.
"""
