from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Tuple

from .config import ARMORY_CHANCE, LIBRARY_CHANCE, SHRINE_CHANCE, FloorConfig
from .tiles import ARMORY_ROOM, FLOOR, LIBRARY_ROOM, NORMAL_ROOM, SHRINE_ROOM, TRAP_ROOM, TREASURE_ROOM


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int


@dataclass
class Room:
    id: int
    x: int
    y: int
    w: int
    h: int
    room_type: str = NORMAL_ROOM

    def cells(self):
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def to_dict(self) -> Dict[str, Any]:
        cx, cy = self.center
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.w,
            "height": self.h,
            "type": self.room_type,
            "center": [cx, cy],
        }


def place_rooms(tiles, leaves: List[Rect], config: FloorConfig, rng) -> List[Room]:
    """Carve one room inside each BSP leaf, keeping a one-tile wall margin.

    Rooms are numbered in generation order; leaves too small for the minimum
    room size are skipped.
    """
    rooms: List[Room] = []
    for leaf in leaves:
        if leaf.w - 2 < config.min_room or leaf.h - 2 < config.min_room:
            continue
        rw = rng.randint(config.min_room, min(config.max_room, leaf.w - 2))
        rh = rng.randint(config.min_room, min(config.max_room, leaf.h - 2))
        rx = rng.randint(leaf.x + 1, leaf.x + leaf.w - rw - 1)
        ry = rng.randint(leaf.y + 1, leaf.y + leaf.h - rh - 1)
        room = Room(len(rooms), rx, ry, rw, rh)
        for ix, iy in room.cells():
            tiles[iy][ix] = FLOOR
        rooms.append(room)
    return rooms


def assign_room_themes(rooms: List[Room], config: FloorConfig, rng) -> None:
    """Give each still-normal room one theme roll; most rolls leave it normal."""
    ladder = [
        (config.trap_chance, TRAP_ROOM),
        (config.treasure_chance, TREASURE_ROOM),
        (SHRINE_CHANCE, SHRINE_ROOM),
        (ARMORY_CHANCE, ARMORY_ROOM),
        (LIBRARY_CHANCE, LIBRARY_ROOM),
    ]
    for room in rooms:
        if room.room_type != NORMAL_ROOM:
            continue
        roll = rng.random()
        threshold = 0.0
        for chance, theme in ladder:
            threshold += chance
            if roll < threshold:
                room.room_type = theme
                break
