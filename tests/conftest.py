"""Pytest configuration and shared fixtures."""

import asyncio
import itertools

import pytest

from EquipTrack.database.medium import InMemoryMedium, SqlAlchemyMedium
from EquipTrack.database.session import create_session_factory
from EquipTrack.exceptions import StorageUnavailableError, StorageWriteFailedError
from EquipTrack.i18n import Translator
from EquipTrack.models import DeviceInfo, Equipment, EquipmentStatus, EquipmentType, Plant
from EquipTrack.services import AuditService, EquipmentService, NotificationService, StorageService
from EquipTrack.services.export_service import FolderShareChannel
from EquipTrack.services.notification_service import MemoryNotificationSink
from EquipTrack.utils import DAY_MS

# 2023-11-14T22:13:20Z
FIXED_NOW = 1_700_000_000_000


class FakeClock:
    """Callable clock returning a controllable epoch-ms value."""

    def __init__(self, now: int = FIXED_NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def advance_days(self, days: int) -> None:
        self.advance(days * DAY_MS)


class FailingMedium(InMemoryMedium):
    """In-memory medium whose reads or selected key writes can be made to fail."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_keys = set()
        # Suspend on every read so overlapping flows interleave
        self.yield_on_read = False

    async def get_item(self, key):
        if self.yield_on_read:
            await asyncio.sleep(0)
        if self.fail_reads:
            raise StorageUnavailableError(f"cannot read '{key}'")
        return await super().get_item(key)

    async def set_item(self, key, value):
        if key in self.fail_keys:
            raise StorageWriteFailedError(f"cannot write '{key}'")
        await super().set_item(key, value)


class FailingSink:
    async def emit(self, title, body, data=None):
        raise RuntimeError("notification permission denied")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def device_info():
    return DeviceInfo(
        device_name="Field Tablet 7",
        network_descriptor="192.168.1.40",
        platform="Linux",
        os_version="6.1",
    )


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def medium():
    return FailingMedium()


@pytest.fixture
def sql_medium():
    """SqlAlchemyMedium over a fresh in-memory SQLite database."""
    return SqlAlchemyMedium(create_session_factory("sqlite://"))


@pytest.fixture
def storage(medium, clock):
    return StorageService(medium, clock=clock)


@pytest.fixture
def audit(medium, clock, device_info, id_factory):
    return AuditService(
        medium,
        device_info_provider=lambda: device_info,
        clock=clock,
        id_factory=lambda: "log-" + id_factory(),
    )


@pytest.fixture
def sink():
    return MemoryNotificationSink()


@pytest.fixture
def notifications(sink):
    return NotificationService(sink)


@pytest.fixture
def translator():
    return Translator("en")


@pytest.fixture
def equipment_service(storage, audit, notifications, translator, clock, id_factory, tmp_path):
    return EquipmentService(
        storage,
        audit,
        notifications,
        translator=translator,
        clock=clock,
        id_factory=id_factory,
        export_dir=str(tmp_path / "exports"),
        share_channel=FolderShareChannel(str(tmp_path / "shared")),
    )


@pytest.fixture
def make_equipment():
    """Factory for Equipment records with sensible defaults."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        fields = {
            "id": f"eq-{n}",
            "tag": f"P-{100 + n}",
            "plant": Plant.CD_1,
            "type": EquipmentType.PUMP,
            "status": EquipmentStatus.AVAILABLE,
            "comments": "",
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Equipment(**fields)

    return _make
