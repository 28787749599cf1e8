"""flight_team."""

from .monitoring.logger import configure_logger

# Configure logger with default settings (just console logging)
# Call configure_logger again with Settings.log_level to change the level
configure_logger()
