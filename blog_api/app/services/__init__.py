"""
Service layer abstraction.

Each service encapsulates business logic for a domain and works on a
store handle passed to its constructor, so API handlers never talk to
the store directly.
"""
