"""Run the API under uvicorn: ``python -m ledger_bridge`` or ``ledger-bridge``."""

import uvicorn

from ledger_bridge.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "ledger_bridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
