# Routes package init
"""
Hivemind — API Routes Package
=============================

Route Inventory:
    - resources.py: /api/sensor/... and /api/switch/... (method dispatch)
    - root.py:      /, /api/ and the 404 / 501 fallbacks

Routes stay thin: they pick the handler, call the store, and shape the
response. Decoding lives in the schemas, persistence in the stores.
"""
