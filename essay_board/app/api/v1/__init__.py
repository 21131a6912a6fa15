"""
Version 1 of the API.

Mounted twice by the application: under ``/api`` (the paths the web
client calls) and under ``/api/v1``.
"""
