"""Services for the OCL CodeSystem write path."""

from ocl_store.services.access_control import AccessControlValidator
from ocl_store.services.batch_persistence import (
    BatchPersistenceEngine,
    ConceptRecord,
    GeneratedId,
    LocalizedTextRecord,
)
from ocl_store.services.code_system_writer import (
    CodeSystemWriter,
    CodeSystemWriteRequest,
    WriteResult,
)
from ocl_store.services.conflict_checker import ConflictChecker
from ocl_store.services.mapping_helpers import (
    add_json_strings,
    get_boolean_property,
    get_string_property,
    to_json_string,
)

__all__ = [
    "AccessControlValidator",
    "ConflictChecker",
    "BatchPersistenceEngine",
    "ConceptRecord",
    "GeneratedId",
    "LocalizedTextRecord",
    "CodeSystemWriter",
    "CodeSystemWriteRequest",
    "WriteResult",
    "add_json_strings",
    "get_boolean_property",
    "get_string_property",
    "to_json_string",
]
