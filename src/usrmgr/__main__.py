"""usrmgr entrypoint.

Run with:
  python -m usrmgr
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("USRMGR_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("USRMGR_HOST", "0.0.0.0")
    port = int(os.getenv("USRMGR_PORT", "4000"))
    reload = os.getenv("USRMGR_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("usrmgr.app:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
