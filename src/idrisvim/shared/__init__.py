"""
Shared components: names, scope environment, errors.
"""

from .names import NameKind, QualifiedName, mangle, target_name, entry_point_name
from .scope import Environment
from .errors import (
    Error, ErrorReporter, IdrisVimError, UnsupportedConstructError,
    MalformedForeignCallError, IRFormatError,
)
