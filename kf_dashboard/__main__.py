from __future__ import annotations

import argparse

import structlog
import uvicorn

from kf_dashboard.config import get_settings
from kf_dashboard.observability.logging import configure_logging


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Kubeflow request parameters and model registry dashboard")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    args = parser.parse_args()

    configure_logging(settings.log_level, json_output=settings.log_json)
    structlog.get_logger("server").info(
        "server_starting",
        host=args.host,
        port=args.port,
        model_registry_url=settings.model_registry_url,
    )
    # log_config=None keeps the handlers installed by configure_logging.
    uvicorn.run("kf_dashboard.main:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
