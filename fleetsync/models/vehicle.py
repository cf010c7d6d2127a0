"""
Fleet vehicles table.
One row per piece of tracked equipment (forklift, tractor, cart, crane-car, truck).
Written only through SqlFleetStorage; rows are never hard-deleted.
"""

from sqlalchemy import Column, String, DateTime, Text
from fleetsync.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    plate = Column(String(50))
    type = Column(String(50), nullable=False)       # VehicleType value
    status = Column(String(50), nullable=False)     # VehicleStatus value
    location = Column(String(200), nullable=False)
    notes = Column(Text)
    last_updated = Column(DateTime, nullable=False)
    updated_by = Column(String(200), nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.name} type={self.type} status={self.status} location={self.location}>"
