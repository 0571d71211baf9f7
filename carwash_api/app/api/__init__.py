"""
API package.

``router`` bundles every route group; ``deps`` holds the dependencies
that hand services and the current admin to the endpoints.
"""
