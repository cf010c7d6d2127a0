"""
Presence tracking — which operators are connected right now.
Keyed by operator id, looked up by connection id, deduplicated by display name
(a second join under the same name replaces the first: same person reconnecting).
A connection carries at most one operator; joining again under a new name
replaces its previous identity.
Never persisted; cleared at every process start.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fleetsync.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Operator:
    id: str
    name: str
    connection_id: str
    last_active: datetime


class PresenceTracker:
    def __init__(self):
        self._operators: dict[str, Operator] = {}

    def join(self, name: str, connection_id: str) -> Operator:
        stale = [op for op in self._operators.values()
                 if op.name == name or op.connection_id == connection_id]
        for op in stale:
            del self._operators[op.id]
            logger.info(f"[PRESENCE] Replacing session of {op.name} ({op.connection_id})")

        operator = Operator(id=str(uuid.uuid4()), name=name,
                            connection_id=connection_id, last_active=datetime.utcnow())
        self._operators[operator.id] = operator
        logger.info(f"[PRESENCE] {name} joined as {operator.id} on {connection_id}")
        return operator

    def leave(self, connection_id: str) -> Optional[Operator]:
        operator = self.by_connection(connection_id)
        if operator is None:
            return None
        del self._operators[operator.id]
        logger.info(f"[PRESENCE] {operator.name} left ({connection_id})")
        return operator

    def by_connection(self, connection_id: str) -> Optional[Operator]:
        return next((op for op in self._operators.values() if op.connection_id == connection_id), None)

    def touch(self, connection_id: str) -> None:
        operator = self.by_connection(connection_id)
        if operator:
            operator.last_active = datetime.utcnow()

    def list(self) -> list[Operator]:
        return list(self._operators.values())

    def clear(self) -> None:
        if self._operators:
            logger.info(f"[PRESENCE] Clearing {len(self._operators)} stale operators")
        self._operators.clear()
