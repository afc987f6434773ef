"""Floor generation phases: grid init, BSP partitioning, room placement, corridor graph & carving.

``generate_floor(seed, difficulty, depth, player_level)`` is the entry point;
the same seed and difficulty always produce the same FloorMap.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from delve.services.rng import stream_for

from .config import Difficulty, FloorConfig
from .encounters import is_boss_room
from .rooms import Rect, Room, assign_room_themes, place_rooms
from .tiles import BOSS_ROOM, ENTRANCE_ROOM, EXIT, EXIT_ROOM, FLOOR, WALL


@dataclass
class FloorMap:
    seed: int
    difficulty: Difficulty
    depth: int
    width: int
    height: int
    rooms: List[Room]
    tiles: List[List[int]]
    corridors: List[Tuple[int, int]] = field(default_factory=list)
    adjacency: Dict[int, List[int]] = field(default_factory=dict)

    @property
    def entrance_room_id(self) -> int:
        return self.rooms[0].id

    @property
    def exit_room_id(self) -> int:
        return self.rooms[-1].id

    def has_room(self, room_id: int) -> bool:
        return 0 <= room_id < len(self.rooms)

    def room(self, room_id: int) -> Room:
        return self.rooms[room_id]

    def neighbors(self, room_id: int) -> List[int]:
        return self.adjacency.get(room_id, [])

    def find_path(self, start: int, goal: int) -> Optional[List[int]]:
        """Shortest room-to-room route over corridors (BFS), or None."""
        if not (self.has_room(start) and self.has_room(goal)):
            return None
        prev: Dict[int, Optional[int]] = {start: None}
        queue = deque([start])
        while queue:
            cur = queue.popleft()
            if cur == goal:
                path = []
                node: Optional[int] = cur
                while node is not None:
                    path.append(node)
                    node = prev[node]
                return path[::-1]
            for nxt in self.neighbors(cur):
                if nxt not in prev:
                    prev[nxt] = cur
                    queue.append(nxt)
        return None

    def to_dict(self, include_tiles: bool = True) -> Dict[str, Any]:
        rooms = []
        for r in self.rooms:
            d = r.to_dict()
            d["connections"] = list(self.neighbors(r.id))
            rooms.append(d)
        out = {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "difficulty": self.difficulty.value,
            "rooms": rooms,
            "entranceRoomId": self.entrance_room_id,
            "exitRoomId": self.exit_room_id,
        }
        if include_tiles:
            out["tiles"] = [list(row) for row in self.tiles]
        return out


class Generator:
    def __init__(self, config: FloorConfig):
        self.config = config
        self.rng = stream_for(config.seed or 0)

    def init_grid(self) -> List[List[int]]:
        return [[WALL for _ in range(self.config.width)] for _ in range(self.config.height)]

    def bsp_partition(self) -> List[Rect]:
        cfg, rng = self.config, self.rng
        min_leaf = cfg.min_leaf
        leaves = [Rect(1, 1, cfg.width - 2, cfg.height - 2)]

        def split_rect(r: Rect):
            split_h = (r.w / r.h) < rng.uniform(0.8, 1.2)
            if r.w < min_leaf * 1.2 and r.h < min_leaf * 1.2:
                return [r]
            if split_h and r.h >= min_leaf * 2:
                cut = rng.randint(min_leaf, r.h - min_leaf)
                return [Rect(r.x, r.y, r.w, cut), Rect(r.x, r.y + cut, r.w, r.h - cut)]
            if (not split_h) and r.w >= min_leaf * 2:
                cut = rng.randint(min_leaf, r.w - min_leaf)
                return [Rect(r.x, r.y, cut, r.h), Rect(r.x + cut, r.y, r.w - cut, r.h)]
            return [r]

        changed = True
        while changed:
            changed = False
            new = []
            for r in leaves:
                parts = split_rect(r)
                if len(parts) == 2:
                    changed = True
                new.extend(parts)
            leaves = new
        return leaves

    def build_room_graph(self, rooms: List[Room]) -> List[Tuple[int, int]]:
        """Minimum spanning tree over k-nearest edges plus a few loop corridors."""
        centers = [r.center for r in rooms]
        k = 4
        edges = []
        for i, (cx1, cy1) in enumerate(centers):
            dists = []
            for j, (cx2, cy2) in enumerate(centers):
                if i == j:
                    continue
                dists.append((abs(cx1 - cx2) + abs(cy1 - cy2), i, j))
            edges.extend(sorted(dists)[:k])
        parent = list(range(len(rooms)))

        def find(a):
            while parent[a] != a:
                parent[a] = parent[parent[a]]
                a = parent[a]
            return a

        def union(a, b):
            ra, rb = find(a), find(b)
            if ra != rb:
                parent[rb] = ra
                return True
            return False

        corridors = []
        seen: Set[Tuple[int, int]] = set()
        for _d, a, b in sorted(edges):
            if union(a, b):
                corridors.append((a, b))
                seen.add((min(a, b), max(a, b)))
        # k-nearest graphs can split into clusters; bridge any leftovers
        for i in range(1, len(rooms)):
            if union(0, i):
                corridors.append((0, i))
                seen.add((0, i))
        for _d, a, b in edges:
            key = (min(a, b), max(a, b))
            if key not in seen and self.rng.random() < self.config.loop_chance:
                corridors.append((a, b))
                seen.add(key)
        return corridors

    def carve_corridors(self, tiles, rooms: List[Room], corridors: List[Tuple[int, int]]):
        cfg, rng = self.config, self.rng

        def carve_cell(cx, cy):
            if 1 <= cx < cfg.width - 1 and 1 <= cy < cfg.height - 1:
                tiles[cy][cx] = FLOOR

        def carve_line(x1, y1, x2, y2):
            if x1 == x2:
                step = 1 if y2 >= y1 else -1
                for yy in range(y1, y2 + step, step):
                    carve_cell(x1, yy)
            elif y1 == y2:
                step = 1 if x2 >= x1 else -1
                for xx in range(x1, x2 + step, step):
                    carve_cell(xx, y1)

        def carve_irregular(start, target):
            (cx, cy), (tx, ty) = start, target
            steps, max_steps = 0, (abs(tx - cx) + abs(ty - cy)) * 3
            while (cx, cy) != (tx, ty) and steps < max_steps:
                steps += 1
                options = []
                if cx < tx:
                    options.append((1, 0))
                if cx > tx:
                    options.append((-1, 0))
                if cy < ty:
                    options.append((0, 1))
                if cy > ty:
                    options.append((0, -1))
                if rng.random() < 0.35:
                    options.extend([(1, 0), (-1, 0), (0, 1), (0, -1)])
                dx, dy = rng.choice(options)
                cx = min(max(1, cx + dx), cfg.width - 2)
                cy = min(max(1, cy + dy), cfg.height - 2)
                carve_cell(cx, cy)
            if cx != tx:
                carve_line(cx, cy, tx, cy)
            if cy != ty:
                carve_line(tx, cy, tx, ty)

        for a, b in corridors:
            (x1, y1), (x2, y2) = rooms[a].center, rooms[b].center
            if rng.random() < cfg.irregular_chance:
                carve_irregular((x1, y1), (x2, y2))
            elif rng.random() < 0.5:
                carve_line(x1, y1, x2, y1)
                carve_line(x2, y1, x2, y2)
            else:
                carve_line(x1, y1, x1, y2)
                carve_line(x1, y2, x2, y2)

    def run(self) -> Tuple[List[List[int]], List[Room], List[Tuple[int, int]]]:
        tiles = self.init_grid()
        leaves = self.bsp_partition()
        rooms = place_rooms(tiles, leaves, self.config, self.rng)
        corridors = self.build_room_graph(rooms) if len(rooms) > 1 else []
        self.carve_corridors(tiles, rooms, corridors)
        return tiles, rooms, corridors


def _adjacency(room_count: int, corridors: List[Tuple[int, int]]) -> Dict[int, List[int]]:
    adj: Dict[int, Set[int]] = {i: set() for i in range(room_count)}
    for a, b in corridors:
        adj[a].add(b)
        adj[b].add(a)
    return {k: sorted(v) for k, v in adj.items()}


def generate_floor(seed: int, difficulty, depth: int, player_level: int = 1, config: Optional[FloorConfig] = None) -> FloorMap:
    """Build the FloorMap for one dungeon level.

    Room 0 is the entrance and the last generated room is the exit (its
    centre tile becomes EXIT). Rooms where encounters are forced to be boss
    fights are tagged so clients can mark them. Remaining rooms may get a
    cosmetic theme (trap, treasure, shrine, armory, library) from a stream
    separate from the layout, so themes never change the geometry of a seed.
    """
    difficulty = Difficulty(difficulty)
    cfg = config or FloorConfig.for_difficulty(difficulty, seed=seed, depth=depth)
    if cfg.seed is None:
        cfg.seed = seed
    tiles, rooms, corridors = Generator(cfg).run()
    for room in rooms[1:-1]:
        if is_boss_room(room.id, depth):
            room.room_type = BOSS_ROOM
    rooms[0].room_type = ENTRANCE_ROOM
    if len(rooms) > 1:
        rooms[-1].room_type = EXIT_ROOM
    assign_room_themes(rooms, cfg, stream_for(f"{seed}-room-themes"))
    ex, ey = rooms[-1].center
    tiles[ey][ex] = EXIT
    return FloorMap(
        seed=seed,
        difficulty=difficulty,
        depth=depth,
        width=cfg.width,
        height=cfg.height,
        rooms=rooms,
        tiles=tiles,
        corridors=corridors,
        adjacency=_adjacency(len(rooms), corridors),
    )


__all__ = ["FloorMap", "Generator", "generate_floor"]
