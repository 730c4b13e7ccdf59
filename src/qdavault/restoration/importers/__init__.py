"""Entity import stages, one per entity kind."""

from qdavault.restoration.importers.audits import AuditImporter
from qdavault.restoration.importers.base import EntityImporter
from qdavault.restoration.importers.codebooks import CodebookImporter
from qdavault.restoration.importers.codes import CodeImporter
from qdavault.restoration.importers.projects import ProjectImporter
from qdavault.restoration.importers.selections import SelectionImporter
from qdavault.restoration.importers.sources import SourceImporter
from qdavault.restoration.importers.teams import TeamImporter
from qdavault.restoration.importers.users import UserImporter
from qdavault.restoration.importers.variables import VariableImporter
from qdavault.storage.models import EntityKind

IMPORTERS: dict[EntityKind, type[EntityImporter]] = {
    EntityKind.USER: UserImporter,
    EntityKind.TEAM: TeamImporter,
    EntityKind.PROJECT: ProjectImporter,
    EntityKind.CODEBOOK: CodebookImporter,
    EntityKind.CODE: CodeImporter,
    EntityKind.SOURCE: SourceImporter,
    EntityKind.VARIABLE: VariableImporter,
    EntityKind.SELECTION: SelectionImporter,
    EntityKind.AUDIT: AuditImporter,
}

__all__ = [
    "IMPORTERS",
    "AuditImporter",
    "CodeImporter",
    "CodebookImporter",
    "EntityImporter",
    "ProjectImporter",
    "SelectionImporter",
    "SourceImporter",
    "TeamImporter",
    "UserImporter",
    "VariableImporter",
]
