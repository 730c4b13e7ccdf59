"""Dependency graph management for entity import ordering."""

from qdavault.exceptions import DependencyError
from qdavault.storage.models import DependencyOrder, EntityKind


class DependencyGraph:
    """Manages entity kind dependency ordering for import.

    Entities that reference other entities must be imported after them so the
    referenced destination IDs are already in the mapping table (e.g., codes
    reference codebooks, so codebooks are imported first).

    The dependency relationships are hardcoded from the QDA schema:
    - Users have no dependencies
    - Teams depend on Users (owner)
    - Projects depend on Teams and Users (creator)
    - Codebooks depend on Projects and Users
    - Codes depend on Codebooks (and other Codes, handled by two-pass import)
    - And so on...

    The import order follows the DependencyOrder enum which assigns priority
    values to each entity kind (lower values = import first).
    """

    # Key: EntityKind, Value: kinds whose mappings it consumes
    DEPENDENCIES: dict[EntityKind, list[EntityKind]] = {
        EntityKind.USER: [],
        EntityKind.TEAM: [EntityKind.USER],  # owner
        EntityKind.PROJECT: [EntityKind.TEAM, EntityKind.USER],
        EntityKind.CODEBOOK: [EntityKind.PROJECT, EntityKind.USER],
        EntityKind.CODE: [
            EntityKind.CODEBOOK,
            # Note: parent code dependency is within same kind, handled by two passes
        ],
        EntityKind.SOURCE: [EntityKind.PROJECT, EntityKind.USER],
        EntityKind.VARIABLE: [EntityKind.SOURCE],
        EntityKind.SELECTION: [
            EntityKind.SOURCE,
            EntityKind.CODE,
            EntityKind.PROJECT,
            EntityKind.USER,
        ],
        EntityKind.AUDIT: [
            EntityKind.USER,
            # polymorphic subject: any kind with mappings
            EntityKind.TEAM,
            EntityKind.PROJECT,
            EntityKind.CODEBOOK,
            EntityKind.CODE,
            EntityKind.SOURCE,
            EntityKind.VARIABLE,
            EntityKind.SELECTION,
        ],
    }

    KIND_TO_ORDER: dict[EntityKind, DependencyOrder] = {
        EntityKind.USER: DependencyOrder.USERS,
        EntityKind.TEAM: DependencyOrder.TEAMS,
        EntityKind.PROJECT: DependencyOrder.PROJECTS,
        EntityKind.CODEBOOK: DependencyOrder.CODEBOOKS,
        EntityKind.CODE: DependencyOrder.CODES,
        EntityKind.SOURCE: DependencyOrder.SOURCES,
        EntityKind.VARIABLE: DependencyOrder.VARIABLES,
        EntityKind.SELECTION: DependencyOrder.SELECTIONS,
        EntityKind.AUDIT: DependencyOrder.AUDITS,
    }

    def get_import_order(self, kinds: list[EntityKind] | None = None) -> list[EntityKind]:
        """Get entity kinds in dependency order (dependencies first).

        Args:
            kinds: Specific kinds to order. If None, returns every kind.

        Returns:
            Kinds sorted by DependencyOrder priority.

        Example:
            >>> graph = DependencyGraph()
            >>> graph.get_import_order([EntityKind.CODE, EntityKind.USER])
            [<EntityKind.USER: 1>, <EntityKind.CODE: 5>]
        """
        if kinds is None:
            kinds = list(self.KIND_TO_ORDER)

        return sorted(
            (kind for kind in kinds if kind in self.KIND_TO_ORDER),
            key=lambda kind: self.KIND_TO_ORDER[kind],
        )

    def validate_no_cycles(self) -> bool:
        """Validate dependency graph has no circular dependencies.

        Uses depth-first search over DEPENDENCIES. Also checks that every
        dependency is ordered strictly before its dependent, since the
        importers run in KIND_TO_ORDER order.

        Returns:
            True if the graph is acyclic and consistent with the import order.

        Raises:
            DependencyError: If a cycle or an out-of-order dependency is found.
        """
        white, gray, black = 0, 1, 2
        state: dict[EntityKind, int] = dict.fromkeys(self.DEPENDENCIES, white)
        path: list[EntityKind] = []

        def visit(kind: EntityKind) -> None:
            if state[kind] == black:
                return

            if state[kind] == gray:
                cycle_start = path.index(kind)
                cycle_path = " -> ".join(k.name for k in path[cycle_start:])
                raise DependencyError(
                    f"Circular dependency detected: {cycle_path} -> {kind.name}. "
                    "Entity kinds form a cycle and cannot be imported in valid order."
                )

            state[kind] = gray
            path.append(kind)

            for dependency in self.DEPENDENCIES.get(kind, []):
                if dependency in self.DEPENDENCIES:
                    visit(dependency)
                if self.KIND_TO_ORDER[dependency] >= self.KIND_TO_ORDER[kind]:
                    raise DependencyError(
                        f"{kind.name} depends on {dependency.name}, "
                        "which is not imported before it"
                    )

            path.pop()
            state[kind] = black

        for kind in self.DEPENDENCIES:
            if state[kind] == white:
                visit(kind)

        return True

    def get_dependencies(self, kind: EntityKind) -> list[EntityKind]:
        """Get direct dependencies for an entity kind.

        Returns:
            Copy of the kinds that must be imported first.
        """
        return self.DEPENDENCIES.get(kind, []).copy()
