from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class BaseInput(ABC):
    """
    Abstract base class for all input types.

    :param source: The data source (e.g., file path).
    :type source: str
    :param opts: Additional options for the input type.
    :type opts: Any
    """
    def __init__(self, source: str, **opts: Any):
        self.source = source
        self.opts = opts

    @abstractmethod
    def get_tables(self) -> List[Dict[str, Any]]:
        """
        Return the logical tables of the source.

        :return: A list of dicts, each with ``name`` and ``rows`` (an iterable of Row dicts).
        :rtype: list[dict]
        """

    def structural_errors(self) -> List[Any]:
        """Problems found in the source as a whole, reported alongside the rows."""
        return []
