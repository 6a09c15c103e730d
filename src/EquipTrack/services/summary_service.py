# services/summary_service.py
"""
Status summaries per plant.

Pure functions of the collection passed in; nothing is stored.
"""

from typing import Dict, Iterable, List

from EquipTrack.logging_config import get_logger
from EquipTrack.models import Equipment, EquipmentStatus, Plant, StatusSummary

logger = get_logger(__name__)


def get_active_equipment(equipment: Iterable[Equipment]) -> List[Equipment]:
    """Records with ``deleted = False``."""
    return [e for e in equipment if not e.deleted]


# -----------------------------
# 1. Summary per plant
# -----------------------------
def calculate_summaries(equipment: Iterable[Equipment]) -> List[StatusSummary]:
    """
    Count active records per plant and status.

    Plants without active records are left out. Output follows the Plant
    enumeration order. Records whose plant is not a known Plant have no
    bucket; they are skipped and logged.
    """
    summary_map: Dict[Plant, StatusSummary] = {plant: StatusSummary(plant=plant) for plant in Plant}

    for item in get_active_equipment(equipment):
        if not isinstance(item.plant, Plant):
            logger.warning(f"Skipping equipment {item.tag} ({item.id}): unknown plant '{item.plant}'")
            continue
        summary_map[item.plant].add(item.status)

    return [summary for summary in summary_map.values() if summary.total > 0]


# -----------------------------
# 2. Status distribution across all plants
# -----------------------------
def count_by_status(equipment: Iterable[Equipment]) -> Dict[EquipmentStatus, int]:
    counts = {status: 0 for status in EquipmentStatus}
    for item in get_active_equipment(equipment):
        counts[item.status] += 1
    return counts
