# Services package init
"""
RectSizer Backend: Services Layer
=================================

What:  Business logic between routes (HTTP) and the shared rectangle state.

Service Inventory:
    - validate_dimensions: The width <= height rule (pure function)
    - RectangleStore: Current dimensions plus the optional durable record
    - RectangleService: Orchestrates delay → validate → persist per request
"""
