"""
Compensation (CTC) normalization.

A role's `ctc` is an open-ended map of component name -> number or text,
e.g. {"base": 1800000, "bonus": "200000", "stock": "negotiable"}.
On every company save each role gets:

- `ctc.total`: sum of every component that parses as a number
- `finalPayFirstYear`: total with the stock grant amortized over the
  vesting period (stock / vesting_years instead of the full grant)
- `finalPayAnnual`: first-year pay without the one-time `bonus`

Textual components are kept verbatim and count as 0. Nothing in here
raises: a bad value is logged and treated as 0.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Amount = Union[int, float]

TOTAL_KEY = "total"
DEFAULT_VESTING_YEARS = 4


def parse_amount(value: Any) -> Tuple[Optional[Amount], bool]:
    """
    Returns (number, ok). `ok` is False when the value is not numeric;
    the number is then None.
    """
    if isinstance(value, bool):
        return None, False
    if isinstance(value, (int, float)):
        return (value, True) if math.isfinite(value) else (None, False)
    if isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None, False
        return (number, True) if math.isfinite(number) else (None, False)
    return None, False


def format_amount(value: Amount) -> str:
    """12.0 -> '12', 12.5 -> '12.5', 1/3 -> '0.33'"""
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 2))


def _as_number(value: Amount) -> Amount:
    return int(value) if float(value).is_integer() else value


def _to_plain_map(ctc: Any) -> Dict[str, Any]:
    if ctc is None:
        return {}
    if isinstance(ctc, Mapping):
        return {str(k): v for k, v in ctc.items()}
    if isinstance(ctc, (list, tuple)):
        # [(key, value), ...] as produced by some clients for ordered maps
        try:
            return {str(k): v for k, v in ctc}
        except (TypeError, ValueError):
            pass
    logger.warning("Compensation map of type %s ignored", type(ctc).__name__)
    return {}


def normalize_ctc(ctc: Any, vesting_years: int = DEFAULT_VESTING_YEARS) -> Tuple[Dict[str, Any], str, str]:
    """
    Normalize one compensation map.

    Returns (ctc_with_total, final_pay_first_year, final_pay_annual).
    A previously computed `total` is replaced, never summed.
    """
    components = _to_plain_map(ctc)
    components.pop(TOTAL_KEY, None)

    total = 0
    parsed = {}
    for key, value in components.items():
        number, ok = parse_amount(value)
        if ok:
            parsed[key] = number
            total += number
        elif not isinstance(value, str):
            logger.warning("Compensation component %r has unusable value %r; counted as 0", key, value)

    vesting = vesting_years if vesting_years and vesting_years > 0 else DEFAULT_VESTING_YEARS
    stock = parsed.get("stock", 0)
    bonus = parsed.get("bonus", 0)
    first_year = total - stock + (stock / vesting if stock > 0 else 0)
    annual = first_year - bonus

    normalized = dict(components)
    normalized[TOTAL_KEY] = _as_number(total)
    return normalized, format_amount(first_year), format_amount(annual)


def normalize_roles(roles: Any, vesting_years: int = DEFAULT_VESTING_YEARS) -> List[Any]:
    """Apply normalize_ctc to every role; non-dict entries pass through."""
    if not roles:
        return []
    normalized = []
    for index, role in enumerate(roles):
        if not isinstance(role, Mapping):
            normalized.append(role)
            continue
        role = dict(role)
        try:
            ctc, first_year, annual = normalize_ctc(role.get("ctc"), vesting_years)
        except Exception:
            logger.exception("Compensation normalization failed for role %d; zeroed", index)
            ctc, first_year, annual = {TOTAL_KEY: 0}, "0", "0"
        role["ctc"] = ctc
        role["finalPayFirstYear"] = first_year
        role["finalPayAnnual"] = annual
        normalized.append(role)
    return normalized
