"""
Audit trail table — one immutable row per changed vehicle field.
vehicle_name is captured at change time so history survives renames.
seq breaks ties between entries written within the same timestamp.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from fleetsync.database import Base


class AuditEntry(Base):
    __tablename__ = "audit_entries"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    vehicle_id = Column(String(36), nullable=False, index=True)
    vehicle_name = Column(String(100), nullable=False)
    action = Column(String(50), nullable=False)     # STATUS_CHANGE | NOTES_UPDATE | LOCATION_CHANGE | CREATED | DELETED
    field = Column(String(50))
    old_value = Column(Text)
    new_value = Column(Text)
    timestamp = Column(DateTime, nullable=False, index=True)
    user_id = Column(String(100), nullable=False)
    user_name = Column(String(200), nullable=False)

    def __repr__(self):
        return f"<AuditEntry {self.action} {self.vehicle_name}.{self.field} {self.old_value!r}->{self.new_value!r}>"
