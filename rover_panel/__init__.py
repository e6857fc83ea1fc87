import logging

from .bus import EventBus
from .config import config as _config

__version__ = "0.1.0"

# Configure logging for the rover_panel package
logging.basicConfig(
    level=_config.log.level,
    format=_config.log.format,
)

event_bus = EventBus()
