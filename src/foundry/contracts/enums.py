"""Status codes, routing categories and strategy kinds used across subsystem boundaries.

Every value here crosses a module seam (plugin output, importer mapping,
run store record), so they are StrEnums: plugins may declare plain strings
and still compare equal.
"""

from enum import StrEnum


class RunStatus(StrEnum):
    """Status of a blueprint run.

    PENDING -> RUNNING -> COMPLETED | FAILED | CANCELLED. There are no
    transitions out of a terminal state.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)


class PathCategory(StrEnum):
    """Routing key attached to a generated file.

    The router resolves a category against the run's PathContext to a
    concrete directory. Files without a category keep their declared path.
    """

    # Frontend
    FRONTEND_APP = "frontend-app"
    FRONTEND_COMPONENTS = "frontend-components"
    FRONTEND_HOOKS = "frontend-hooks"
    FRONTEND_LIB = "frontend-lib"
    FRONTEND_TYPES = "frontend-types"
    FRONTEND_STYLES = "frontend-styles"
    FRONTEND_PUBLIC = "frontend-public"

    # Backend
    BACKEND_ROUTES = "backend-routes"
    BACKEND_SERVICES = "backend-services"
    BACKEND_MIDDLEWARE = "backend-middleware"
    BACKEND_LIB = "backend-lib"
    BACKEND_TYPES = "backend-types"

    # Contracts
    CONTRACT = "contract"
    CONTRACT_TEST = "contract-test"
    CONTRACT_SOURCE = "contract-source"
    CONTRACT_SCRIPTS = "contract-scripts"

    # Shared / root
    DOCS = "docs"
    ROOT = "root"
    SHARED_TYPES = "shared-types"


class CategoryDomain(StrEnum):
    """Which part of the project a category belongs to."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    CONTRACT = "contract"
    SHARED = "shared"


class MergeableFileType(StrEnum):
    """Merge policy selected from a file name.

    NONE means a collision keeps the existing content and records a warning.
    """

    BARREL_EXPORTS = "barrel-exports"
    TYPES = "types"
    CONSTANTS = "constants"
    JSON_MANIFEST = "json-manifest"
    LINE_SET = "line-set"
    NONE = "none"


class ImportStrategy(StrEnum):
    """How a component package is laid into the assembled tree.

    Values:
        AUTO: Use path mappings when present (and a frontend exists),
            otherwise copy the package under packages/<name>.
        MAPPED: Force mapping-driven routing.
        PACKAGE: Always copy the package intact under packages/<name>.
        MERGE_INTO_FRONTEND: Deprecated. Merge the package's src/ tree into
            the frontend source root. Kept for packages that predate path
            mappings.
    """

    AUTO = "auto"
    MAPPED = "mapped"
    PACKAGE = "package"
    MERGE_INTO_FRONTEND = "merge-into-frontend"


class WarningKind(StrEnum):
    """Kind of recoverable problem recorded during assembly."""

    PATCH_TARGET_MISSING = "patch_target_missing"
    PATCH_MARKER_MISSING = "patch_marker_missing"
    MERGE_CONFLICT = "merge_conflict"
    MERGE_NOTE = "merge_note"
    COMPONENT_MISSING = "component_missing"


class LogLevel(StrEnum):
    """Level of a run store log entry."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
