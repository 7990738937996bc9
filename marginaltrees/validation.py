"""Checks that conversions attach to existing clonal frame branches."""

from __future__ import annotations
from typing import Iterable

from marginaltrees.clonal_frame import ClonalFrame
from marginaltrees.elements.conversion import Conversion
from marginaltrees.exceptions import StructuralInconsistency


def validate_conversion(clonal_frame: ClonalFrame, conversion: Conversion) -> None:
    """
    Verify that ``conversion`` connects two distinct branches alive at its height.

    A branch above node ``x`` spans the open interval
    ``(height(x), height(parent(x)))``; the root branch is unbounded above.

    Raises:
        StructuralInconsistency: If an endpoint is unknown, donor and recipient
            coincide, or the height lies outside either attachment branch.
    """
    for role, nr in (("donor", conversion.donor), ("recipient", conversion.recipient)):
        if nr not in clonal_frame:
            StructuralInconsistency.raise_for_conversion(
                conversion, f"{role} node {nr} is not part of the clonal frame"
            )

    if conversion.donor == conversion.recipient:
        StructuralInconsistency.raise_for_conversion(
            conversion, "donor and recipient are the same branch"
        )

    for role, nr in (("donor", conversion.donor), ("recipient", conversion.recipient)):
        lower, upper = clonal_frame.branch_bounds(nr)
        if not lower < conversion.height < upper:
            StructuralInconsistency.raise_for_conversion(
                conversion,
                f"height outside the {role} branch ({lower}, {upper})",
            )


def validate_conversions(
    clonal_frame: ClonalFrame, conversions: Iterable[Conversion]
) -> None:
    for conversion in conversions:
        validate_conversion(clonal_frame, conversion)
