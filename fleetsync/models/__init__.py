# FleetSync — Database Models
# Import all models here for SQLAlchemy discovery

from fleetsync.models.vehicle import Vehicle          # noqa
from fleetsync.models.audit_entry import AuditEntry   # noqa
