"""Factories shared by the unit tests."""

import asyncio
import time
from datetime import datetime
import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fleetsync.database import create_tables
from fleetsync.schemas.operator import OperatorRef
from fleetsync.schemas.vehicle import VehicleCreate, VehicleOut, VehicleStatus, VehicleType
from fleetsync.services.audit_service import AuditLedger
from fleetsync.services.storage import InMemoryFleetStorage, SqlFleetStorage
from fleetsync.services.vehicle_service import VehicleStore

CARLA = OperatorRef(id="u1", name="Carla")
BRUNO = OperatorRef(id="u2", name="Bruno")


def make_store(storage=None):
    storage = storage or InMemoryFleetStorage()
    ledger = AuditLedger(storage)
    return VehicleStore(storage, ledger), ledger, storage


def make_sql_storage():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    return SqlFleetStorage(sessionmaker(bind=engine, autoflush=False))


def make_create(name="MVX020", vehicle_type=VehicleType.FORKLIFT,
                status=VehicleStatus.AVAILABLE, location="PMO", notes=None):
    return VehicleCreate(name=name, type=vehicle_type, status=status, location=location, notes=notes)


def make_vehicle(name, vehicle_type=VehicleType.FORKLIFT,
                 status=VehicleStatus.AVAILABLE, location="PMO"):
    return VehicleOut(id=str(uuid.uuid4()), name=name, type=vehicle_type, status=status,
                      location=location, last_updated=datetime.utcnow(), updated_by="system")


class FakeObserver:
    """Records every (event, data) pair the hub sends to one connection."""

    def __init__(self):
        self.messages = []

    async def send(self, event, data):
        self.messages.append((event, data))

    def events(self):
        return [event for event, _ in self.messages]

    def last(self, event):
        return next(data for name, data in reversed(self.messages) if name == event)


class DeadObserver:
    async def send(self, event, data):
        raise ConnectionResetError("peer went away")


class StalledObserver:
    """A peer that stays connected but never finishes reading a frame."""

    def __init__(self):
        self.attempts = 0

    async def send(self, event, data):
        self.attempts += 1
        await asyncio.Event().wait()


class SlowReadStorage(InMemoryFleetStorage):
    """In-memory storage whose reads block the worker thread briefly, so concurrent updates overlap."""

    def get_vehicle(self, vehicle_id):
        vehicle = super().get_vehicle(vehicle_id)
        time.sleep(0.05)
        return vehicle
