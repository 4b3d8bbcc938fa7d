import heapq
from typing import Dict, List, Tuple

from hexgrid import Coord, HexCoord, hex_distance, neighbors
from sim.terrain import BLOCKING_COST, movement_cost


def terrain_cost(terrain, h: Coord) -> int:
    if not terrain.in_bounds(h):
        return BLOCKING_COST
    return movement_cost(terrain.terrain_at(h))


def reconstruct(came_from: Dict[HexCoord, HexCoord], current: HexCoord) -> List[HexCoord]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def astar(terrain, start: Coord, goal: Coord) -> List[HexCoord]:
    """Return the cheapest route from ``start`` to ``goal``.

    The route lists the hexes entered, excluding ``start``.  An empty list
    means either ``start == goal`` or that no passable route exists.
    Blocking and off-map hexes are never expanded.
    """
    start = HexCoord(start[0], start[1])
    goal = HexCoord(goal[0], goal[1])
    if start == goal:
        return []
    if terrain_cost(terrain, goal) >= BLOCKING_COST:
        return []
    open_heap: List[Tuple[float, int, HexCoord]] = []
    counter = 0  # tie-breaker keeps heap order deterministic
    heapq.heappush(open_heap, (0.0, counter, start))
    came_from: Dict[HexCoord, HexCoord] = {}
    g_score: Dict[HexCoord, float] = {start: 0.0}
    closed: set[HexCoord] = set()
    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current == goal:
            full_path = reconstruct(came_from, current)
            return full_path[1:]
        if current in closed:
            continue
        closed.add(current)
        for neighbor in neighbors(current):
            step = terrain_cost(terrain, neighbor)
            if step >= BLOCKING_COST:
                continue
            tentative = g_score[current] + step
            if tentative < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                f = tentative + hex_distance(neighbor, goal)
                counter += 1
                heapq.heappush(open_heap, (f, counter, neighbor))
    return []
