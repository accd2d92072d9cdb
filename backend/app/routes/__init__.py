# Routes package init
"""
RectSizer Backend: API Routes Package
=====================================

Route Inventory:
    - rectangle.py:  GET  /api/rectangle            (current dimensions)
                     POST /api/rectangle            (delay, validate, save)
                     POST /api/rectangle/validate   (delay, validate; optional)
    - health.py:     GET  /health                   (liveness)

Routes stay thin: read the request, call RectangleService, return the model.
"""
