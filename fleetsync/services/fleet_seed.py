"""
Default fleet loaded on first start when the vehicle store is empty.
Grouped here by site; order inside a site does not matter (the store sorts by name).
"""

from fleetsync.schemas.vehicle import VehicleCreate, VehicleStatus, VehicleType

FORKLIFT, TRACTOR, CRANE_CAR, TRUCK = (
    VehicleType.FORKLIFT, VehicleType.TRACTOR, VehicleType.CRANE_CAR, VehicleType.TRUCK
)
AVAILABLE, MAINTENANCE, UNAVAILABLE = (
    VehicleStatus.AVAILABLE, VehicleStatus.MAINTENANCE, VehicleStatus.UNAVAILABLE
)


def _v(name, vehicle_type, status, location, notes=None) -> VehicleCreate:
    return VehicleCreate(name=name, type=vehicle_type, status=status, location=location, notes=notes)


DEFAULT_FLEET: list[VehicleCreate] = [
    # ── PMO forklifts ─────────────────────────────────────────────────────
    _v("MVX003", FORKLIFT, AVAILABLE, "PMO"),
    _v("MVX006", FORKLIFT, AVAILABLE, "PMO"),

    # ── Piquete forklifts ─────────────────────────────────────────────────
    _v("EPM004", FORKLIFT, AVAILABLE, "Piquete"),
    _v("EPM020", FORKLIFT, AVAILABLE, "Piquete"),
    _v("EPM021", FORKLIFT, MAINTENANCE, "Piquete", "EIXO QUEBRADO/SEM PREVISÃO"),
    _v("EMP027", FORKLIFT, UNAVAILABLE, "Piquete"),
    _v("EMP028", FORKLIFT, AVAILABLE, "Piquete"),

    # ── Expedição forklifts ───────────────────────────────────────────────
    _v("EMP029", FORKLIFT, UNAVAILABLE, "Expedição"),
    _v("MNP003", FORKLIFT, AVAILABLE, "Expedição", "PREVENTIVA/CORRETIVA PROGRAMADA"),
    _v("MNP002", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX001", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX002", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX004", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX005", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX007", FORKLIFT, UNAVAILABLE, "Expedição", "EM FINALIZAÇÃO"),
    _v("MVX008", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX009", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX011", FORKLIFT, AVAILABLE, "Expedição"),
    _v("MVX012", FORKLIFT, AVAILABLE, "Expedição"),
    _v("EMP030", FORKLIFT, UNAVAILABLE, "Expedição", "SEM PREVISÃO"),
    _v("MVX010", FORKLIFT, AVAILABLE, "Expedição"),

    # ── Tractors ──────────────────────────────────────────────────────────
    _v("TRT001", TRACTOR, AVAILABLE, "Geral"),
    _v("TRT002", TRACTOR, UNAVAILABLE, "Geral", "TRANCA DO CAPU, (AVALIANDO ADAPTAÇÃO)"),
    _v("TRT003", TRACTOR, AVAILABLE, "Geral"),
    _v("TRT004", TRACTOR, AVAILABLE, "Geral"),
    _v("TRT005", TRACTOR, AVAILABLE, "Geral"),

    # ── Crane-cars ────────────────────────────────────────────────────────
    _v("GDT001", CRANE_CAR, AVAILABLE, "Geral"),
    _v("GDT002", CRANE_CAR, AVAILABLE, "Geral"),
    _v("GDT003", CRANE_CAR, AVAILABLE, "Geral"),

    # ── Trucks ────────────────────────────────────────────────────────────
    _v("GDT006", TRUCK, AVAILABLE, "Geral"),
    _v("GDT007", TRUCK, AVAILABLE, "Geral"),
    _v("GDT009", TRUCK, AVAILABLE, "Geral"),
]
