"""
Employee API entrypoint
Serves employee operations backed by the upstream employee API
"""

import sys

import uvicorn
from loguru import logger

from employee_api.api.app import create_app
from employee_api.settings import global_settings


def configure_logging(level: str) -> None:
    """Replace the default loguru sink with one at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def main() -> None:
    """Main function"""
    configure_logging(global_settings.log_level)
    logger.info(
        f"Starting Employee API on {global_settings.server_host}:{global_settings.server_port}, "
        f"upstream={global_settings.employee_api_base_url}"
    )

    app = create_app(settings=global_settings)
    uvicorn.run(
        app,
        host=global_settings.server_host,
        port=global_settings.server_port,
        log_level=global_settings.log_level.lower(),
    )

    logger.info("Employee API stopped")


if __name__ == "__main__":
    main()
