"""Model namespace for index artifact schemas."""

from artifacts.models.artifacts.defines import (
    DefineEntry,
    DefineIndex,
    DefineIndexMeta,
)
from artifacts.models.artifacts.diff import DiffResult, ModifiedEntry
from artifacts.models.artifacts.index import (
    FunctionEntry,
    FunctionIndex,
    FunctionIndexMeta,
)
from artifacts.models.artifacts.symbols import (
    AliasRecord,
    RegistrationRecord,
    SourceLocation,
    SymbolRecord,
)

__all__ = [
    "AliasRecord",
    "DefineEntry",
    "DefineIndex",
    "DefineIndexMeta",
    "DiffResult",
    "FunctionEntry",
    "FunctionIndex",
    "FunctionIndexMeta",
    "ModifiedEntry",
    "RegistrationRecord",
    "SourceLocation",
    "SymbolRecord",
]
