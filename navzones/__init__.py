#==============================================================================
# NavZones - Core Package Initialization
#==============================================================================
# File: __init__.py
# Description: Package initialization for the dead zone navigation layer
# Date: October 2026
#==============================================================================

"""
NavZones: Runtime Dead Zones for Navmesh Path Queries

Operators mark spherical regions of a navigable surface as impassable at
runtime. Every path query run through PathQueryEngine respects the zones
of its region, without rebuilding the mesh.
"""

__version__ = "0.1.0"

from .errors import NavZonesError, ValidationError, NotFoundError, QueryFailure
from .logging_utils import NavLogger, LogLevel
from .zones import ExclusionZone, Vector3, ZoneRegistry, ZoneManager
from .navmesh import NavMesh, NavMeshQuery, PathQueryEngine, PathQueryResult
from .config import NavZonesConfig, ConfigStore

__all__ = [
    "NavZonesError",
    "ValidationError",
    "NotFoundError",
    "QueryFailure",
    "NavLogger",
    "LogLevel",
    "ExclusionZone",
    "Vector3",
    "ZoneRegistry",
    "ZoneManager",
    "NavMesh",
    "NavMeshQuery",
    "PathQueryEngine",
    "PathQueryResult",
    "NavZonesConfig",
    "ConfigStore",
]
