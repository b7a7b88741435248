"""security_advisories package: app/core/infra.

Expose library-friendly API client at the package level.
"""

from .app.api import AdvisoriesClient, AppConfig

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "AdvisoriesClient",
    "AppConfig",
]
