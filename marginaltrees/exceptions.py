"""
Custom exceptions for marginal tree reconstruction.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, NoReturn
import logging

if TYPE_CHECKING:
    from marginaltrees.elements.conversion import Conversion

logger = logging.getLogger(__name__)


class MarginalTreeError(Exception):
    """Base exception for marginal tree reconstruction errors."""

    pass


class TreeStructureError(MarginalTreeError):
    """Raised when a clonal frame is not a valid rooted binary tree with heights."""

    pass


class StructuralInconsistency(MarginalTreeError):
    """Raised when a conversion does not fit onto the clonal frame."""

    @staticmethod
    def raise_for_conversion(conversion: Conversion, reason: str) -> NoReturn:
        """
        Raises a StructuralInconsistency describing the offending conversion.

        Args:
            conversion: The conversion that failed validation
            reason: Human readable description of the failed check

        Raises:
            StructuralInconsistency: Always raised
        """
        message = (
            f"Conversion {conversion.conversion_id} "
            f"(donor={conversion.donor}, recipient={conversion.recipient}, "
            f"height={conversion.height}) is inconsistent with the clonal frame: "
            f"{reason}"
        )
        logger.error(message)
        raise StructuralInconsistency(message)


class InvariantViolation(MarginalTreeError):
    """Raised when the lineage sweep does not end in exactly one root lineage."""

    pass
