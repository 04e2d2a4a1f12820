"""Coverage planning and adaptive re-tasking for the drone fleet."""

from typing import List, Optional, Sequence, Tuple

import config
from anomaly_field import AnomalyField
from drone import Drone, DroneStatus, Point
from zone import Zone, partition_grid


def boustrophedon_path(zone: Zone) -> List[Point]:
    """
    Serpentine sweep over every cell of a zone.

    Even local rows run left to right, odd local rows right to left.
    """
    path = []
    for local_row, y in enumerate(range(zone.y_min, zone.y_max)):
        xs = range(zone.x_min, zone.x_max)
        if local_row % 2 == 1:
            xs = reversed(xs)
        path.extend((float(x), float(y)) for x in xs)
    return path


class Coordinator:
    """
    Plans initial coverage and redirects drones toward uncovered hotspots.

    Holds no per-tick state; everything it needs is read from the drones
    and the field passed in.
    """

    def __init__(
        self,
        hotspot_threshold: float = config.HOTSPOT_THRESHOLD,
        retask_radius: float = config.RETASK_RADIUS,
        base: Point = config.BASE_POSITION
    ):
        self.hotspot_threshold = hotspot_threshold
        self.retask_radius = retask_radius
        self.base = base
        self.zones: List[Zone] = []

    def plan_coverage(self, num_drones: int, width: int, height: int) -> List[List[Point]]:
        """
        Build one sweep path per drone, each ending at base.

        Drone i sweeps zone i of partition_grid(). Deterministic for the
        same arguments.

        Returns:
            List of paths indexed by drone position in the fleet
        """
        self.zones = partition_grid(num_drones, width, height)
        plan = []
        for i in range(num_drones):
            path = boustrophedon_path(self.zones[i])
            path.append(self.base)
            plan.append(path)
        return plan

    def zone_for(self, drone_index: int) -> Optional[Zone]:
        """Zone assigned to a drone by the last plan, if any."""
        if 0 <= drone_index < len(self.zones):
            return self.zones[drone_index]
        return None

    def retask(self, drones: Sequence[Drone], field: AnomalyField) -> List[Tuple[int, Point]]:
        """
        Send the nearest roaming drone to every hotspot nobody is near.

        Greedy and myopic: one drone may be picked for several hotspots in a
        pass, each pick overwriting its previous emergency path, and its
        coverage progress is discarded.

        Args:
            drones: The fleet
            field: Anomaly field to scan for hotspots

        Returns:
            (drone_id, hotspot) for every assignment made, in order
        """
        assignments = []
        roaming = [d for d in drones if d.status == DroneStatus.ROAMING]
        if not roaming:
            return assignments

        for hx, hy in field.hotspots(self.hotspot_threshold):
            hotspot = (float(hx), float(hy))
            if any(d.distance_to(*hotspot) < self.retask_radius for d in roaming):
                continue

            nearest = self._select_nearest(hotspot, roaming)
            nearest.assign_path([hotspot, self.base])
            assignments.append((nearest.id, hotspot))

        return assignments

    def _select_nearest(self, point: Point, candidates: Sequence[Drone]) -> Drone:
        """Closest drone to point; ties go to the lowest id."""
        return min(candidates, key=lambda d: (d.distance_to(*point), d.id))
