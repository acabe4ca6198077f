"""
API key authentication for the kubexec HTTP service.

Keys come from configuration in the form "key" or "service:key"; the
service part is returned as the caller identity.
"""

import logging
import secrets
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger("kubexec.auth")


class ApiKeyAuth:
    """Validates X-API-Key headers against configured keys."""

    def __init__(self, api_keys: List[str], require_auth: bool = True):
        """
        Initialize auth module.

        Args:
            api_keys: Entries in "key" or "service:key" format
            require_auth: When False every request is accepted
        """
        self.require_auth = require_auth
        self.api_keys: Dict[str, Optional[str]] = self._parse_api_keys(api_keys)

    @staticmethod
    def _parse_api_keys(entries: List[str]) -> Dict[str, Optional[str]]:
        """Map each key to its service identity (None for plain keys)."""
        keys = {}
        for entry in entries:
            entry = entry.strip()
            if not entry:
                continue

            # Check for service:key format
            if ":" in entry:
                service, key = entry.split(":", 1)
                keys[key.strip()] = service.strip()
            else:
                keys[entry] = None

        return keys

    def verify_api_key(self, api_key: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Verify API key.

        Args:
            api_key: API key from X-API-Key header

        Returns:
            Tuple of (is_valid, service_identity)
        """
        if not self.require_auth:
            return True, None

        if not api_key:
            return False, None

        for key, service in self.api_keys.items():
            # Use constant-time comparison for security
            if secrets.compare_digest(api_key, key):
                logger.debug(f"API key verified for {service or 'anonymous service'}")
                return True, service

        logger.warning("Rejected invalid API key")
        return False, None
