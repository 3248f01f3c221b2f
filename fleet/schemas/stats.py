# fleet/schemas/stats.py
"""Dashboard counters returned by /api/stats."""

from fleet.schemas.common import CamelModel


class FleetStatsOut(CamelModel):
    total_vehicles: int
    available_vehicles: int
    assigned_vehicles: int
    maintenance_vehicles: int      # maintenance + out_of_service
    total_clients: int
    available_clients: int
    active_assignments: int
