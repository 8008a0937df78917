"""
Hivemind — Entry Point
======================

Usage:
    python -m hivemind
    HIVEMIND_STORE=memory HIVEMIND_PORT=8080 python -m hivemind

Builds the configured store, wires it into the app and serves it with
uvicorn. A store that cannot be opened or a port that cannot be bound
ends the process with a non-zero exit code.
"""

import uvicorn

from hivemind.config import settings
from hivemind.main import create_app, setup_logging
from hivemind.stores import build_store


def main() -> None:
    setup_logging(settings.log_level)
    app = create_app(build_store(settings), settings)
    # log_config=None keeps the logging configured by setup_logging()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
