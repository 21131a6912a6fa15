"""
Essay Board backend.

The ``app`` subpackage holds the FastAPI application, its persistence
layer and the services that sit between the two.
"""
