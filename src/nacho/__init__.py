"""Parser and structural validator for NACHA ACH files."""
from .engine.parser import NachaFileParser, parse_ach
from .models.errors import NachaFileError
from .models.records import NachaRecord
from .types import RecordType

__version__ = "0.1.0"

__all__ = ["NachaFileParser", "NachaFileError", "NachaRecord", "RecordType", "parse_ach", "__version__"]
