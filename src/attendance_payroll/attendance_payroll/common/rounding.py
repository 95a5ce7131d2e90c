from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_QUANTS = {n: Decimal(1).scaleb(-n) for n in range(0, 7)}


def round_half_up(value: float, places: int) -> float:
    """Round with ROUND_HALF_UP on the shortest decimal repr of ``value``.

    Going through ``str`` keeps 1.5249999999999999 (float noise for 1.525)
    rounding like the decimal value people read in reports.
    """
    quant = _QUANTS.get(places) or Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP))
