"""
Profile Service - the optional local user profile.

The profile is an opaque JSON object (name, email, ...). There is no
authentication behind it; signing out just clears the stored blob.
"""

import json
from typing import Any, Dict, Optional

from EquipTrack.database.medium import PersistenceMedium
from EquipTrack.exceptions import StorageUnavailableError
from EquipTrack.logging_config import get_logger
from EquipTrack.services.storage_service import USER_KEY

# Initialize logger for this module
logger = get_logger(__name__)


class ProfileService:
    def __init__(self, medium: PersistenceMedium):
        self.medium = medium

    async def save_user(self, user: Dict[str, Any]) -> None:
        """
        Store the profile, replacing any previous one.

        Raises:
            StorageWriteFailedError: If the profile cannot be written
        """
        await self.medium.set_item(USER_KEY, json.dumps(user))
        logger.info(f"Profile saved for: {user.get('email') or user.get('name') or 'user'}")

    async def get_user(self) -> Optional[Dict[str, Any]]:
        """Stored profile, or None when absent or unreadable."""
        try:
            data = await self.medium.get_item(USER_KEY)
            return json.loads(data) if data else None
        except (StorageUnavailableError, ValueError) as e:
            logger.error(f"Error getting user: {e}")
            return None

    async def clear_user(self) -> None:
        """Sign out. Raises StorageWriteFailedError on failure."""
        await self.medium.remove_item(USER_KEY)
        logger.info("Profile cleared")
