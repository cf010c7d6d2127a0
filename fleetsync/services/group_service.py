"""
Vehicle grouping by (type, location) with availability counts.
Pure function of the vehicle list — recomputed on every call, never cached.
"""

from fleetsync.schemas.vehicle import VehicleGroupOut, VehicleOut, VehicleStatus


def build_groups(vehicles: list[VehicleOut]) -> list[VehicleGroupOut]:
    """
    Group vehicles in the order their (type, location) key is first seen.
    `vehicles` is expected in canonical store order (by name).
    """
    groups: dict[tuple, VehicleGroupOut] = {}
    for vehicle in vehicles:
        key = (vehicle.type, vehicle.location)
        group = groups.get(key)
        if group is None:
            group = VehicleGroupOut(
                id=f"{vehicle.type.value}_{vehicle.location}",
                name=vehicle.location,
                type=vehicle.type,
                vehicles=[],
                available_count=0,
                total_count=0,
            )
            groups[key] = group

        group.vehicles.append(vehicle)
        group.total_count += 1
        if vehicle.status == VehicleStatus.AVAILABLE:
            group.available_count += 1

    return list(groups.values())
