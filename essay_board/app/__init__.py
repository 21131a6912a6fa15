"""
Application package.

The API is split into ``core`` (configuration, logging, storage),
``schemas`` (request and response models), ``services`` (the record
store and helpers) and ``api`` (versioned routers).
"""
