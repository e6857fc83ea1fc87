import logging

import uvicorn

from rover_panel.config import config


def main() -> None:
    # Configure logging for the entire application
    logging.basicConfig(
        level=config.log.level,
        format=config.log.format,
    )

    # Set log level for our app modules
    logging.getLogger("rover_panel").setLevel(config.log.level)

    uvicorn.run(
        "rover_panel.web.server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
