"""Tests for the append-only change log."""

import json

import pytest

from EquipTrack.exceptions import StorageWriteFailedError
from EquipTrack.models import ChangeAction, DeviceInfo
from EquipTrack.services import AuditService
from EquipTrack.services.storage_service import CHANGELOG_KEY

from conftest import FIXED_NOW


class TestRecord:
    @pytest.mark.asyncio
    async def test_entry_fields(self, audit, device_info):
        entry = await audit.record("eq-1", ChangeAction.CREATE, {"tag": "P-101"})

        assert entry.id == "log-id-1"
        assert entry.equipment_id == "eq-1"
        assert entry.action == ChangeAction.CREATE
        assert entry.timestamp == FIXED_NOW
        assert entry.changes == {"tag": "P-101"}
        assert entry.device_info.device_name == device_info.device_name
        assert entry.device_info.network_descriptor == "192.168.1.40"

    @pytest.mark.asyncio
    async def test_stored_device_info_has_name_and_ip_only(self, audit, medium):
        await audit.record("eq-1", ChangeAction.UPDATE, {"status": "AVAILABLE"})

        [stored] = json.loads(medium.items[CHANGELOG_KEY])
        assert stored["deviceInfo"] == {"deviceName": "Field Tablet 7", "ipAddress": "192.168.1.40"}
        assert stored["equipmentId"] == "eq-1"
        assert stored["action"] == "UPDATE"

    @pytest.mark.asyncio
    async def test_entries_are_only_appended(self, audit, clock):
        first = await audit.record("eq-1", ChangeAction.CREATE)
        clock.advance(10)
        second = await audit.record("eq-1", ChangeAction.DELETE)

        logs = await audit.get_all_change_logs()
        assert logs == [first, second]

    @pytest.mark.asyncio
    async def test_failed_append_keeps_existing_log(self, audit, medium):
        await audit.record("eq-1", ChangeAction.CREATE)
        before = medium.items[CHANGELOG_KEY]

        medium.fail_keys.add(CHANGELOG_KEY)
        with pytest.raises(StorageWriteFailedError):
            await audit.record("eq-1", ChangeAction.UPDATE)

        assert medium.items[CHANGELOG_KEY] == before

    @pytest.mark.asyncio
    async def test_unknown_device(self, medium):
        service = AuditService(medium, device_info_provider=DeviceInfo)

        entry = await service.record("eq-1", ChangeAction.CREATE)

        assert entry.device_info.device_name == "Unknown Device"
        assert entry.device_info.network_descriptor == "Unknown"


class TestQueries:
    @pytest.mark.asyncio
    async def test_logs_for_equipment_newest_first(self, audit, clock):
        await audit.record("eq-1", ChangeAction.CREATE)
        clock.advance(1000)
        await audit.record("eq-2", ChangeAction.CREATE)
        clock.advance(1000)
        await audit.record("eq-1", ChangeAction.STATUS_CHANGE)

        logs = await audit.get_logs_for_equipment("eq-1")

        assert [log.action for log in logs] == [ChangeAction.STATUS_CHANGE, ChangeAction.CREATE]
        assert [log.timestamp for log in logs] == [FIXED_NOW + 2000, FIXED_NOW]

    @pytest.mark.asyncio
    async def test_no_logs(self, audit):
        assert await audit.get_all_change_logs() == []
        assert await audit.get_logs_for_equipment("eq-1") == []
