"""Services package for the age key manager."""

from age_key_manager.services.key_file_service import KeyFileService
from age_key_manager.services.sops_config_service import SOPSConfigService

__all__ = [
    "KeyFileService",
    "SOPSConfigService",
]
