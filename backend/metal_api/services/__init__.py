"""Services — persistence helpers called by the routes.

Invariants:
    - db_service is model-agnostic; delete_dependent knows the Metal -> MetalRate relation
    - Services never build HTTP responses; "not found" is signalled by returning None
"""
