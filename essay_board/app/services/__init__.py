"""
Service layer abstraction.

Each service encapsulates the logic for one domain on top of the JSON
document storage in ``core.db``.  Services are instantiated once per
application and reached from the API handlers through ``app.state``.
"""
