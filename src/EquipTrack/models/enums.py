# models/enums.py
import enum


class Plant(str, enum.Enum):
    CD_1 = "CD-1"
    CD_2 = "CD-2"
    CD_3 = "CD-3"
    CD_4 = "CD-4"
    AV_2 = "AV-2"
    AV_3 = "AV-3"
    PG_1 = "PG-1"
    SER = "SER"
    DESAL = "DESAL"
    BC_4 = "BC-4"
    BC_5 = "BC-5"
    OTHER = "OTHER"


class EquipmentType(str, enum.Enum):
    PUMP = "PUMP"
    MOTOR = "MOTOR"
    FAN = "FAN"
    FAN_COOLER = "FAN COOLER"
    BLOWER = "BLOWER"
    FURNACE = "FURNACE"
    HEAT_EXCHANGER = "HEAT EXCHANGER"
    CONTROL_VALVE = "CONTROL VALVE"
    INSTRUMENT = "INSTRUMENT"
    DRUM = "DRUM"
    TOWER = "TOWER"
    TANK = "TANK"


class EquipmentStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_OPERATION = "IN OPERATION"
    NOT_AVAILABLE = "NOT AVAILABLE"
    IN_WORKSHOP = "IN WORKSHOP"


# Statuses that count towards the overdue rule
CRITICAL_STATUSES = frozenset({EquipmentStatus.NOT_AVAILABLE, EquipmentStatus.IN_WORKSHOP})


class DeletionReason(str, enum.Enum):
    UPLOAD_ERROR = "UPLOAD ERROR"
    DEVICE_DISASSEMBLED = "DEVICE DISASSEMBLED"
    OTHER = "OTHER"


class ChangeAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    STATUS_CHANGE = "STATUS_CHANGE"
