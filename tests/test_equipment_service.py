"""Tests for the equipment flows (validation, store, change log, notifications)."""

import asyncio
import logging
import os
from datetime import date

import pytest
from openpyxl import load_workbook

from EquipTrack.i18n import Translator
from EquipTrack.messages import ErrorTypes, SystemMessages
from EquipTrack.models import ChangeAction, DeletionReason, EquipmentStatus, Plant
from EquipTrack.services import EquipmentService, NotificationService
from EquipTrack.services import equipment_service as equipment_service_module
from EquipTrack.services.storage_service import CHANGELOG_KEY, EQUIPMENT_KEY
from EquipTrack.utils import DAY_MS

from conftest import FIXED_NOW, FailingSink


async def _add(service, tag="p-101", plant="CD-1", equipment_type="PUMP", status="AVAILABLE", comments=""):
    result = await service.add_equipment(tag, plant, equipment_type, status, comments)
    assert result["success"], result
    return result["equipment"]


class TestAddEquipment:
    @pytest.mark.asyncio
    async def test_creates_record_and_change_log(self, equipment_service, audit):
        result = await equipment_service.add_equipment(" p-101 ", "CD-1", "PUMP", "AVAILABLE", " new ")

        assert result["success"] is True
        assert result["message"] == "Equipment added successfully"
        equipment = result["equipment"]
        assert equipment.id == "id-1"
        assert equipment.tag == "P-101"
        assert equipment.comments == "new"
        assert equipment.created_at == equipment.updated_at == FIXED_NOW

        [entry] = await audit.get_all_change_logs()
        assert entry.action == ChangeAction.CREATE
        assert entry.equipment_id == "id-1"
        assert entry.changes["tag"] == "P-101"
        assert entry.changes["createdAt"] == FIXED_NOW
        assert result["change_log"] == entry

    @pytest.mark.asyncio
    async def test_invalid_input_writes_nothing(self, equipment_service, medium):
        result = await equipment_service.add_equipment("", "CD-1", "PUMP", "AVAILABLE")

        assert result["success"] is False
        assert result["error_type"] == ErrorTypes.VALIDATION
        assert result["field"] == "tag"
        assert medium.items == {}

    @pytest.mark.asyncio
    async def test_storage_failure(self, equipment_service, medium):
        medium.fail_keys.add(EQUIPMENT_KEY)

        result = await equipment_service.add_equipment("P-1", "CD-1", "PUMP", "AVAILABLE")

        assert result["success"] is False
        assert result["error_type"] == ErrorTypes.STORAGE
        assert CHANGELOG_KEY not in medium.items

    @pytest.mark.asyncio
    async def test_change_log_failure_keeps_the_record(self, equipment_service, medium, caplog):
        medium.fail_keys.add(CHANGELOG_KEY)

        result = await equipment_service.add_equipment("P-1", "CD-1", "PUMP", "AVAILABLE")

        assert result["success"] is True
        assert result["change_log"] is None
        assert len(await equipment_service.list_equipment()) == 1
        assert "Change log write failed for CREATE" in caplog.text


class TestUpdateEquipment:
    @pytest.mark.asyncio
    async def test_updates_logs_and_notifies(self, equipment_service, audit, sink, clock):
        equipment = await _add(equipment_service)
        clock.advance(60_000)

        result = await equipment_service.update_equipment(
            equipment.id, "p-101", "CD-1", "PUMP", "IN WORKSHOP", "seal leak"
        )

        assert result["success"] is True
        updated = result["equipment"]
        assert updated.status == EquipmentStatus.IN_WORKSHOP
        assert updated.comments == "seal leak"
        assert updated.updated_at == FIXED_NOW + 60_000
        assert updated.created_at == FIXED_NOW

        logs = await audit.get_logs_for_equipment(equipment.id)
        assert [log.action for log in logs] == [ChangeAction.UPDATE, ChangeAction.CREATE]
        assert logs[0].changes == {
            "tag": "P-101",
            "plant": "CD-1",
            "type": "PUMP",
            "status": "IN WORKSHOP",
            "comments": "seal leak",
        }

        assert sink.notifications == [
            {"title": "Equipment status updated", "body": "P-101 - In Workshop", "data": None}
        ]

    @pytest.mark.asyncio
    async def test_unknown_id(self, equipment_service, audit, sink):
        await _add(equipment_service)

        result = await equipment_service.update_equipment("missing", "P-1", "CD-1", "PUMP", "AVAILABLE")

        assert result["success"] is False
        assert result["error_type"] == ErrorTypes.NOT_FOUND
        assert [log.action for log in await audit.get_all_change_logs()] == [ChangeAction.CREATE]
        assert sink.notifications == []

    @pytest.mark.asyncio
    async def test_invalid_status_writes_nothing(self, equipment_service, medium):
        equipment = await _add(equipment_service)
        before = medium.items

        result = await equipment_service.update_equipment(equipment.id, "P-101", "CD-1", "PUMP", "BROKEN")

        assert result["error_type"] == ErrorTypes.VALIDATION
        assert medium.items == before

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_the_update(self, storage, audit, clock, id_factory):
        service = EquipmentService(
            storage, audit, NotificationService(FailingSink()), clock=clock, id_factory=id_factory
        )
        equipment = await _add(service)

        result = await service.update_equipment(equipment.id, "P-101", "CD-1", "PUMP", "NOT AVAILABLE")

        assert result["success"] is True


class TestChangeStatus:
    @pytest.mark.asyncio
    async def test_logs_previous_status(self, equipment_service, audit, sink):
        equipment = await _add(equipment_service, status="IN OPERATION")

        result = await equipment_service.change_status(equipment.id, EquipmentStatus.NOT_AVAILABLE)

        assert result["success"] is True
        assert result["equipment"].status == EquipmentStatus.NOT_AVAILABLE
        [latest, _] = await audit.get_logs_for_equipment(equipment.id)
        assert latest.action == ChangeAction.STATUS_CHANGE
        assert latest.changes == {"status": "NOT AVAILABLE", "previousStatus": "IN OPERATION"}
        assert sink.notifications[-1]["body"] == "P-101 - Not Available"

    @pytest.mark.asyncio
    async def test_unknown_id(self, equipment_service):
        result = await equipment_service.change_status("missing", "AVAILABLE")

        assert result["error_type"] == ErrorTypes.NOT_FOUND
        assert result["message"] == "Equipment 'missing' was not found."

    @pytest.mark.asyncio
    async def test_overlapping_changes_log_the_true_previous_status(self, equipment_service, audit, medium):
        equipment = await _add(equipment_service, status="AVAILABLE")
        medium.yield_on_read = True

        await asyncio.gather(
            equipment_service.change_status(equipment.id, "IN WORKSHOP"),
            equipment_service.change_status(equipment.id, "NOT AVAILABLE"),
        )

        logs = await audit.get_logs_for_equipment(equipment.id)
        transitions = {
            (log.changes["previousStatus"], log.changes["status"])
            for log in logs
            if log.action == ChangeAction.STATUS_CHANGE
        }
        assert transitions == {("AVAILABLE", "IN WORKSHOP"), ("IN WORKSHOP", "NOT AVAILABLE")}
        assert (await equipment_service.get_equipment(equipment.id)).status == EquipmentStatus.NOT_AVAILABLE

    @pytest.mark.asyncio
    async def test_spanish_notification(self, equipment_service, sink):
        equipment_service.translator = Translator("es")
        equipment = await _add(equipment_service)

        await equipment_service.change_status(equipment.id, "IN WORKSHOP")

        assert sink.notifications[-1] == {
            "title": "Estado del equipo actualizado",
            "body": "P-101 - En Taller",
            "data": None,
        }


class TestDeleteEquipment:
    @pytest.mark.asyncio
    async def test_soft_delete(self, equipment_service, audit):
        equipment = await _add(equipment_service)

        result = await equipment_service.delete_equipment(equipment.id, "OTHER", "  scrapped ")

        assert result["success"] is True
        assert result["message"] == "Equipment deleted successfully"
        assert await equipment_service.list_equipment() == []
        [stored] = await equipment_service.list_equipment(include_deleted=True)
        assert stored.deleted is True
        assert stored.deletion_details == "scrapped"

        [latest, _] = await audit.get_logs_for_equipment(equipment.id)
        assert latest.action == ChangeAction.DELETE
        assert latest.changes == {"deletionReason": "OTHER", "deletionDetails": "scrapped"}

    @pytest.mark.asyncio
    async def test_details_only_kept_for_other(self, equipment_service):
        equipment = await _add(equipment_service)

        result = await equipment_service.delete_equipment(equipment.id, DeletionReason.UPLOAD_ERROR, "typo")

        assert result["equipment"].deletion_reason == DeletionReason.UPLOAD_ERROR
        assert result["equipment"].deletion_details is None

    @pytest.mark.asyncio
    async def test_other_without_details(self, equipment_service, medium):
        equipment = await _add(equipment_service)
        before = medium.items

        result = await equipment_service.delete_equipment(equipment.id, "OTHER", " ")

        assert result["success"] is False
        assert result["field"] == "deletion_details"
        assert medium.items == before

    @pytest.mark.asyncio
    async def test_unknown_id(self, equipment_service, medium):
        result = await equipment_service.delete_equipment("missing", "UPLOAD ERROR")

        assert result["error_type"] == ErrorTypes.NOT_FOUND
        assert CHANGELOG_KEY not in medium.items


class TestReads:
    @pytest.mark.asyncio
    async def test_unreadable_storage_degrades_to_empty(self, equipment_service, medium, caplog):
        await _add(equipment_service)
        medium.fail_reads = True

        with caplog.at_level(logging.ERROR):
            assert await equipment_service.list_equipment() == []
            assert await equipment_service.get_change_logs() == []

        assert "could not be read" in caplog.text

    @pytest.mark.asyncio
    async def test_search(self, equipment_service):
        await _add(equipment_service, tag="P-101", plant="CD-1")
        await _add(equipment_service, tag="V-7", plant="DESAL", equipment_type="CONTROL VALVE")

        assert [e.tag for e in await equipment_service.search_equipment("desal")] == ["V-7"]
        assert [e.tag for e in await equipment_service.search_equipment("valve")] == ["V-7"]
        assert [e.tag for e in await equipment_service.search_equipment("p-1")] == ["P-101"]
        assert len(await equipment_service.search_equipment("  ")) == 2

    @pytest.mark.asyncio
    async def test_get_equipment(self, equipment_service):
        equipment = await _add(equipment_service)

        assert await equipment_service.get_equipment(equipment.id) == equipment
        assert await equipment_service.get_equipment("missing") is None


class TestDashboard:
    @pytest.mark.asyncio
    async def test_summary_follows_equipment_lifecycle(self, equipment_service):
        equipment = await _add(equipment_service, tag="P-101", plant="CD-1")

        [summary] = (await equipment_service.load_dashboard())["summaries"]
        assert (summary.plant, summary.available, summary.total) == (Plant.CD_1, 1, 1)

        await equipment_service.change_status(equipment.id, "IN WORKSHOP")
        [summary] = (await equipment_service.load_dashboard())["summaries"]
        assert (summary.available, summary.in_workshop, summary.total) == (0, 1, 1)

        await equipment_service.delete_equipment(equipment.id, "OTHER", "test")
        assert (await equipment_service.load_dashboard())["summaries"] == []

    @pytest.mark.asyncio
    async def test_summaries_and_overdue_check(self, equipment_service, clock, sink):
        await _add(equipment_service, tag="P-1", status="IN WORKSHOP")
        await _add(equipment_service, tag="P-2", status="AVAILABLE", plant="SER")
        clock.advance(31 * DAY_MS)

        dashboard = await equipment_service.load_dashboard()

        assert len(dashboard["equipment"]) == 2
        assert [s.plant for s in dashboard["summaries"]] == [Plant.CD_1, Plant.SER]
        assert dashboard["overdue_count"] == 1
        assert sink.notifications[-1]["data"] == {"overdueCount": 1}


class TestExport:
    @pytest.mark.asyncio
    async def test_csv_export_is_written_and_shared(self, equipment_service, tmp_path):
        await _add(equipment_service)

        result = await equipment_service.export_equipment("csv", today=date(2025, 3, 1))

        assert result["success"] is True
        assert result["message"] == "Data exported successfully"
        assert os.path.exists(result["path"])
        assert (tmp_path / "shared" / "equipment_export_2025-03-01.csv").exists()

    @pytest.mark.asyncio
    async def test_xlsx_export(self, equipment_service):
        await _add(equipment_service)

        result = await equipment_service.export_equipment("xlsx", today=date(2025, 3, 1))

        assert result["path"].endswith(".xlsx")

    @pytest.mark.asyncio
    async def test_no_share_channel(self, equipment_service):
        equipment_service.share_channel = None

        result = await equipment_service.export_equipment()

        assert result["success"] is False
        assert result["error_type"] == ErrorTypes.EXPORT
        assert result["message"].startswith("Error exporting data")

    @pytest.mark.asyncio
    async def test_unreadable_storage(self, equipment_service, medium):
        medium.fail_reads = True

        result = await equipment_service.export_equipment()

        assert result["error_type"] == ErrorTypes.STORAGE

    @pytest.mark.asyncio
    async def test_xlsx_export_with_unusual_plant_code(self, equipment_service, storage, make_equipment):
        await storage.add_equipment(make_equipment(tag="X-1", plant="CD/9"))

        result = await equipment_service.export_equipment("xlsx", today=date(2025, 3, 1))

        assert result["success"] is True
        assert load_workbook(result["path"]).sheetnames == ["CD-9"]

    @pytest.mark.asyncio
    async def test_unexpected_export_error_returns_failure(self, equipment_service, monkeypatch, caplog):
        def broken_exporter(*args):
            raise ValueError("Invalid character / found in sheet title")

        monkeypatch.setattr(equipment_service_module, "export_to_workbook", broken_exporter)

        result = await equipment_service.export_equipment("xlsx")

        assert result["success"] is False
        assert result["error_type"] == ErrorTypes.APPLICATION
        assert result["message"] == SystemMessages.UNEXPECTED_ERROR
        assert "Unexpected export error" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_format(self, equipment_service):
        result = await equipment_service.export_equipment("pdf")

        assert result["error_type"] == ErrorTypes.VALIDATION
