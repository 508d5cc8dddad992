"""
Safe Route Engine

Safety-weighted walking routes without a street network. Alternative
geometries are synthesized as waypoints between source and destination,
joined into a small directed graph, and every edge's routing cost is raised
according to how close it passes to recorded incidents. Dijkstra then picks
the cheapest route.

## Quick Start

```python
import numpy as np
from safe_route_engine import IncidentStore, SafeRoutePlanner

store = IncidentStore.from_file("incident_data.csv")
planner = SafeRoutePlanner(store, rng=np.random.default_rng(7))

plan = planner.plan(12.9716, 77.5946, 12.9352, 77.6146)
print(plan.statistics.route_length_km, plan.map_link)
```

## Main Components

- **SafeRoutePlanner**: Main interface for route calculation
- **IncidentStore**: Incident corpus with spatial index
- **IncidentStoreHandle**: Reloadable, atomically published store reference
- **RoutingConfig**: Configuration management

## Architecture

- `algorithms/`: Graph, Dijkstra, crime penalties and the planning pipeline
- `mapping/`: Waypoint generation and graph construction
- `data/`: Incident loading, spatial indexing and distance utilities
- `config/`: Configuration management
"""

from .config import RoutingConfig
from .data import GeoPoint, Incident, IncidentStore, IncidentStoreHandle
from .algorithms import CrimePenaltyApplier, Graph, IndexedMinHeap, shortest_path
from .algorithms.optimization import RoutePlan, RouteStatistics, SafeRoutePlanner
from .mapping import RouteGraphBuilder, WaypointGenerator, generate_waypoints
from .errors import (
    DataLoadError,
    InvalidInputError,
    NoPathError,
    NodeNotFoundError,
    PenaltyComputationError,
    RoutingError
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    'SafeRoutePlanner',
    'RoutePlan',
    'RouteStatistics',
    'RoutingConfig',

    # Data
    'GeoPoint',
    'Incident',
    'IncidentStore',
    'IncidentStoreHandle',

    # Pipeline stages
    'WaypointGenerator',
    'generate_waypoints',
    'RouteGraphBuilder',
    'CrimePenaltyApplier',
    'Graph',
    'IndexedMinHeap',
    'shortest_path',

    # Errors
    'RoutingError',
    'InvalidInputError',
    'DataLoadError',
    'NoPathError',
    'NodeNotFoundError',
    'PenaltyComputationError',

    # Metadata
    '__version__'
]
