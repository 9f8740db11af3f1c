"""Health service for basic health checks"""
import logging
from datetime import datetime, timezone

from service.dto import HealthResponseDTO

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def get_health() -> HealthResponseDTO:
    """
    Get basic health status.

    Returns:
        HealthResponseDTO: Health check result
    """
    logger.info("Health check requested")

    return HealthResponseDTO(
        ok=True,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=VERSION
    )
