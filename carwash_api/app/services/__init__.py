"""
Service layer.

Each service encapsulates business logic for one collection and is
constructed with an explicit database handle and settings, so API
handlers never touch storage directly.
"""
