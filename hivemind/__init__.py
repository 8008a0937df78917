"""
Hivemind — Package Initializer
==============================

What: Marks the `hivemind` directory as a Python package.
Who:  Used by uvicorn (`hivemind.main:app`), `python -m hivemind` and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │        Routes (HTTP dispatch)       │  ← status codes, headers, bodies
    ├─────────────────────────────────────┤
    │     Schemas (Sensor / Switch)       │  ← JSON decode / encode
    ├─────────────────────────────────────┤
    │   Stores (memory | sqlite on disk)  │  ← one bucket per entity kind
    └─────────────────────────────────────┘

    Routes only ever talk to the abstract HivemindStore, so a store backend
    can be swapped without touching the HTTP layer.
"""

__version__ = "1.0.0"
