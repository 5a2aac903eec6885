"""
GST slabs (reference data). Services and products point at these by id;
checkout uses settings.DEFAULT_GST_RATE_ID. Salons bill intra-state, so the
slab is split evenly into CGST and SGST; IGST is listed for display only.
"""
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional


class GSTRateRow(NamedTuple):
    id: int
    name: str
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal

    @property
    def total_rate(self) -> Decimal:
        return self.cgst_rate + self.sgst_rate


def _slab(slab_id: int, percent: str) -> GSTRateRow:
    total = Decimal(percent)
    half = total / 2
    return GSTRateRow(slab_id, f"GST {percent}%", half, half, total)


_SLABS: Dict[int, GSTRateRow] = {
    row.id: row
    for row in (
        _slab(1, "0"),
        _slab(2, "5"),
        _slab(3, "12"),
        _slab(4, "18"),
        _slab(5, "28"),
    )
}


def get_gst_rates() -> List[GSTRateRow]:
    return list(_SLABS.values())


def get_gst_rate_by_id(gst_rate_id: int) -> Optional[GSTRateRow]:
    """Return the GST slab for the given id, or None if not found."""
    return _SLABS.get(gst_rate_id)
