from pathlib import Path
from typing import Iterable, List, Sequence

import numpy as np
import tsplib95

from .tour.base import City


HISTORY_ROOT = Path("resources")
HISTORY_BEST_DISTANCE = "historical-best-distance.csv"
HISTORY_DISTANCE = "historical-distance.csv"
HISTORY_FITNESS = "historical-fitness.csv"
HISTORY_FILES = (HISTORY_BEST_DISTANCE, HISTORY_DISTANCE, HISTORY_FITNESS)


DEFAULT_CITIES: List[City] = [
    City("A", 160, 189),
    City("B", 170, 188),
    City("C", 104, 118),
    City("D", 63, 149),
    City("E", 63, 177),
    City("F", 33, 185),
    City("G", 27, 178),
    City("H", 4, 180),
    City("I", 35, 118),
    City("J", 36, 37),
    City("K", 20, 9),
    City("L", 68, 26),
    City("M", 78, 22),
    City("N", 109, 49),
    City("O", 131, 9),
    City("P", 176, 15),
    City("Q", 139, 48),
    City("R", 139, 65),
    City("S", 160, 70),
    City("T", 191, 57),
    City("U", 181, 90),
    City("V", 195, 139),
    City("W", 197, 185),
    City("X", 184, 178),
    City("Y", 176, 187),
]


def validate_cities(cities: Sequence[City]) -> None:
    if not cities:
        raise ValueError("City list must not be empty.")
    seen = set()
    for city in cities:
        if city.name in seen:
            raise ValueError(f"Duplicate city name {city.name!r}.")
        seen.add(city.name)


def load_cities(path: Path) -> List[City]:
    """Read the node coordinates of a TSPLIB .tsp file as cities named by node id."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No TSPLIB file at {path}")
    problem = tsplib95.load(str(path))
    coords = problem.node_coords
    if not coords:
        raise ValueError(f"{path} has no NODE_COORD_SECTION; only coordinate instances are supported.")
    return [City(str(node), float(xy[0]), float(xy[1])) for node, xy in sorted(coords.items())]


def save_historical_data(file_name: str, data: Iterable[float], root: Path = HISTORY_ROOT) -> Path:
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    path = root / file_name
    lines = "\n".join(str(v) for v in data)
    with path.open("a") as f:
        if lines:
            f.write(lines + "\n")
    return path


def load_historical_data(file_name: str, root: Path = HISTORY_ROOT) -> np.ndarray:
    path = Path(root) / file_name
    if not path.exists() or not path.read_text().strip():
        return np.array([], dtype=np.float64)
    return np.loadtxt(path, dtype=np.float64, ndmin=1)
