"""Backup import: reading bundles, remapping IDs and importing entities in order."""

from qdavault.restoration.backup_reader import BackupReader, ensure_bundle_exists
from qdavault.restoration.context import ImportContext
from qdavault.restoration.dependency_graph import DependencyGraph
from qdavault.restoration.id_mapper import IDMappingTable
from qdavault.restoration.identity import (
    IdentityMode,
    IdentityResolver,
    ResolvedIdentity,
)
from qdavault.restoration.orchestrator import ImportOrchestrator, ImportReport
from qdavault.restoration.statistics import EntityCounts, ImportStatistics

__all__ = [
    "BackupReader",
    "DependencyGraph",
    "EntityCounts",
    "IDMappingTable",
    "IdentityMode",
    "IdentityResolver",
    "ImportContext",
    "ImportOrchestrator",
    "ImportReport",
    "ImportStatistics",
    "ResolvedIdentity",
    "ensure_bundle_exists",
]
