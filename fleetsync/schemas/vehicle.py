# fleetsync/schemas/vehicle.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from enum import Enum
from typing import Optional


class VehicleType(str, Enum):
    FORKLIFT = "EMPILHADEIRA"
    TRACTOR = "TRATOR"
    CART = "CARROCA"
    CRANE_CAR = "KRANE_CAR"
    TRUCK = "CAMINHAO"


class VehicleStatus(str, Enum):
    AVAILABLE = "DISPONIVEL"
    IN_USE = "EM_USO"
    MAINTENANCE = "MANUTENCAO"
    UNAVAILABLE = "INDISPONIVEL"


class VehicleCreate(BaseModel):
    name: str
    plate: Optional[str] = None
    type: VehicleType
    status: VehicleStatus = VehicleStatus.AVAILABLE
    location: str
    notes: Optional[str] = None


class VehicleUpdate(BaseModel):
    """Partial update — only fields present in the payload are applied."""
    name: Optional[str] = None
    plate: Optional[str] = None
    type: Optional[VehicleType] = None
    status: Optional[VehicleStatus] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class VehicleOut(BaseModel):
    id: str
    name: str
    plate: Optional[str] = None
    type: VehicleType
    status: VehicleStatus
    location: str
    notes: Optional[str] = None
    last_updated: datetime
    updated_by: str

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class VehicleGroupOut(BaseModel):
    id: str                  # "{type}_{location}"
    name: str                # location label
    type: VehicleType
    vehicles: list[VehicleOut]
    available_count: int
    total_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
