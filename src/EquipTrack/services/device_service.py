"""Device provenance for change-log entries."""

import platform
import socket

from EquipTrack.logging_config import get_logger
from EquipTrack.models import DeviceInfo

logger = get_logger(__name__)


def _local_address() -> str:
    # UDP connect sends nothing; it only selects the outgoing interface
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.connect(("10.255.255.255", 1))
        return sock.getsockname()[0]


def get_device_info() -> DeviceInfo:
    """
    Describe the current device.

    Falls back to "Unknown Device" / "Unknown" instead of failing: a missing
    network never blocks saving equipment.
    """
    device_name = platform.node() or "Unknown Device"

    network_descriptor = "Unknown"
    try:
        network_descriptor = _local_address()
    except OSError as e:
        logger.warning(f"Error getting IP address: {e}")

    return DeviceInfo(
        device_name=device_name,
        network_descriptor=network_descriptor,
        platform=platform.system() or None,
        os_version=platform.release() or "Unknown",
    )
