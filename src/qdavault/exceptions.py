"""Custom exception classes for qdavault."""


class QdaVaultError(Exception):
    """Base exception for all qdavault errors."""

    pass


class ConfigError(QdaVaultError):
    """Exception raised for configuration errors."""

    pass


class BundleNotFoundError(ConfigError):
    """Exception raised when the backup bundle directory does not exist."""

    pass


class IdentityResolutionError(ConfigError):
    """Exception raised when the destination identity cannot be resolved."""

    pass


class StorageError(QdaVaultError):
    """Exception raised for storage layer errors."""

    pass


class NotFoundError(StorageError):
    """Exception raised when a record or stored file is not found."""

    pass


class BackupReadError(QdaVaultError):
    """Exception raised when a backup file cannot be read or decoded."""

    pass


class DependencyError(QdaVaultError):
    """Exception raised for invalid entity dependency relationships."""

    pass


class MappingConflictError(QdaVaultError):
    """Exception raised when a source ID is mapped twice in one run."""

    def __init__(self, entity: str, source_id: str, existing_id: int):
        """Initialize mapping conflict error.

        Args:
            entity: Entity kind name
            source_id: Source identifier that was already mapped
            existing_id: Destination ID already recorded for it
        """
        self.entity = entity
        self.source_id = source_id
        self.existing_id = existing_id
        super().__init__(
            f"{entity} source ID {source_id!r} is already mapped to destination ID {existing_id}"
        )


class RecordValidationError(QdaVaultError):
    """Exception raised when a backup record is missing required data."""

    pass


class UnresolvedReferenceError(QdaVaultError):
    """Exception raised when a mandatory reference has no ID mapping."""

    def __init__(self, field: str, entity: str, source_id: object):
        """Initialize unresolved reference error.

        Args:
            field: Record field holding the reference
            entity: Entity kind the reference points to
            source_id: Referenced source identifier
        """
        self.field = field
        self.entity = entity
        self.source_id = source_id
        super().__init__(f"{field}: {entity.lower()} {source_id} not found in mappings")
