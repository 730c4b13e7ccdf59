"""Constants used throughout the qdavault codebase.

Centralizes defaults, file names and fallback values so importers and the CLI
agree on them.
"""

# Default locations
DEFAULT_BUNDLE_PATH = "./backup"
DEFAULT_DB_PATH = "qdavault.db"
DEFAULT_STORAGE_ROOT = "storage"

SQLITE_BUSY_TIMEOUT_SECONDS = 60

# Backup bundle layout
BACKUP_FILE_SUFFIX = ".json"
PROJECT_CONTENT_FOLDER = "sources"  # <bundle>/<project_id>/sources/<name>.html
CONVERTED_CONTENT_SUFFIX = ".html"
CONVERTED_CONTENT_FILENAME = "converted.html"
CONVERTED_STATUS = "converted:html"

# Extensions stripped from source names before probing for converted content
DOCUMENT_EXTENSIONS = ("txt", "html", "doc", "docx", "pdf", "rtf", "odt")

# Record fallbacks
DEFAULT_USER_NAME = "Imported User"
DEFAULT_CODE_COLOR = "#000000"
DEFAULT_SOURCE_TYPE = "text"
DEFAULT_VARIABLE_TYPE = "text"
DEFAULT_AUDIT_EVENT = "imported"
DEFAULT_AUDIT_USER_TYPE = "App\\Models\\User"

# Unusable credential for imported users (they must go through a reset)
UNUSABLE_PASSWORD_PREFIX = "!"
UNUSABLE_PASSWORD_BYTES = 32

# Logging of offending records
LOG_CONTEXT_MAX_CHARS = 2000
LOG_VALUE_MAX_CHARS = 200

# Summary rendering
SUMMARY_RULE_WIDTH = 39
