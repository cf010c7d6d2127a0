"""End-to-end tests: REST query endpoints and the WebSocket sync channel."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fastapi.testclient import TestClient
from fleetsync.main import app
from fleetsync.services.fleet_seed import DEFAULT_FLEET


def receive(ws):
    message = ws.receive_json()
    return message["event"], message["data"]


class TestQueryEndpoints:
    def test_vehicles_and_groups(self):
        with TestClient(app) as client:
            vehicles = client.get("/api/v1/vehicles").json()
            groups = client.get("/api/v1/groups").json()

        assert len(vehicles) == len(DEFAULT_FLEET)
        assert [v["name"] for v in vehicles] == sorted(v["name"] for v in vehicles)
        assert {"id", "lastUpdated", "updatedBy"} <= set(vehicles[0])
        assert sum(g["totalCount"] for g in groups) == len(DEFAULT_FLEET)

    def test_vehicle_filters_and_lookup(self):
        with TestClient(app) as client:
            tractors = client.get("/api/v1/vehicles", params={"vehicle_type": "TRATOR"}).json()
            one = client.get(f"/api/v1/vehicles/{tractors[0]['id']}")
            missing = client.get("/api/v1/vehicles/does-not-exist")

        assert [v["name"] for v in tractors] == ["TRT001", "TRT002", "TRT003", "TRT004", "TRT005"]
        assert one.json()["name"] == "TRT001"
        assert missing.status_code == 404

    def test_health(self):
        with TestClient(app) as client:
            body = client.get("/api/v1/health").json()

        assert body["status"] == "ok"
        assert body["storage"] == "ok"
        assert body["vehicles"] == len(DEFAULT_FLEET)


class TestSyncChannel:
    def test_join_update_and_audit(self):
        with TestClient(app) as client:
            with client.websocket_connect("/api/v1/ws") as ws:
                ws.send_json({"event": "join", "data": {"name": "Carla"}})
                event, snapshot = receive(ws)
                assert event == "initialSnapshot"
                assert len(snapshot["vehicles"]) == len(DEFAULT_FLEET)
                event, presence = receive(ws)
                assert event == "presenceUpdate"
                assert [op["name"] for op in presence["operators"]] == ["Carla"]

                target = next(v for v in snapshot["vehicles"] if v["name"] == "MVX003")
                ws.send_json({"event": "update", "data": {
                    "vehicleId": target["id"],
                    "fields": {"status": "MANUTENCAO"},
                    "operatorId": "u1",
                    "operatorName": "Carla",
                }})
                event, updated = receive(ws)
                assert event == "vehicleUpdated"
                assert updated["vehicle"]["status"] == "MANUTENCAO"
                pmo = next(g for g in updated["groups"] if g["id"] == "EMPILHADEIRA_PMO")
                assert pmo["availableCount"] == 1
                event, audit = receive(ws)
                assert event == "auditUpdate"
                assert audit["auditHistory"][0]["newValue"] == "MANUTENCAO"

                operators = client.get("/api/v1/operators").json()
                assert [op["name"] for op in operators] == ["Carla"]

            history = client.get("/api/v1/audit", params={"limit": 5}).json()
            assert [e["action"] for e in history] == ["STATUS_CHANGE"]

    def test_second_operator_sees_broadcast(self):
        with TestClient(app) as client:
            with client.websocket_connect("/api/v1/ws") as ana, \
                    client.websocket_connect("/api/v1/ws") as bob:
                # Round-trip on bob first so its connection is registered with the hub
                bob.send_json({"event": "auditRequest", "data": {}})
                assert receive(bob)[0] == "auditHistory"

                ana.send_json({"event": "join", "data": {"name": "Ana"}})
                receive(ana)                               # initialSnapshot
                receive(ana)                               # presenceUpdate (Ana)
                receive(bob)                               # presenceUpdate (Ana)

                bob.send_json({"event": "join", "data": {"name": "Bob"}})
                receive(bob)                               # initialSnapshot
                receive(bob)                               # presenceUpdate (Ana, Bob)
                event, presence = receive(ana)
                assert event == "presenceUpdate"
                assert sorted(op["name"] for op in presence["operators"]) == ["Ana", "Bob"]

                bob.send_json({"event": "create", "data": {"fields": {
                    "name": "MVX020", "type": "EMPILHADEIRA", "status": "DISPONIVEL", "location": "PMO",
                }}})
                event, created = receive(ana)
                assert event == "vehicleCreated"
                assert created["vehicle"]["updatedBy"] == "Bob"
                event, audit = receive(ana)
                assert audit["auditHistory"][0]["action"] == "CREATED"

    def test_malformed_frame_gets_error(self):
        with TestClient(app) as client:
            with client.websocket_connect("/api/v1/ws") as ws:
                ws.send_text("not json")
                event, data = receive(ws)

        assert event == "error"
        assert data["message"] == "Malformed message"
