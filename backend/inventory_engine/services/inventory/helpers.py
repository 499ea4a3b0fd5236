"""
Inventory arithmetic helpers
Quantities and money are Decimals rounded half-up to two places.
"""
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from threading import Lock
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Union

from inventory_engine.core.config import settings

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Optional[Number]) -> Decimal:
    """Round a money amount to currency precision"""
    places = Decimal(1).scaleb(-settings.CURRENCY_DECIMAL_PLACES)
    return to_decimal(value).quantize(places, rounding=ROUND_HALF_UP)


def round_qty(value: Optional[Number]) -> Decimal:
    """Round a quantity to stock precision"""
    places = Decimal(1).scaleb(-settings.QUANTITY_DECIMAL_PLACES)
    return to_decimal(value).quantize(places, rounding=ROUND_HALF_UP)


def today() -> date:
    return date.today()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemLockRegistry:
    """
    Per-item locks for in-process writers.

    Receipts read the full receipt history and rewrite avg_cost; holding
    the item's lock makes that read-modify-write atomic within a process.
    Writers in other processes are not covered.
    """

    def __init__(self):
        self._locks: Dict[int, Lock] = {}
        self._guard = Lock()

    def _lock_for(self, item_id: int) -> Lock:
        with self._guard:
            lock = self._locks.get(item_id)
            if lock is None:
                lock = Lock()
                self._locks[item_id] = lock
            return lock

    @contextmanager
    def hold(self, item_id: int) -> Iterator[None]:
        lock = self._lock_for(item_id)
        with lock:
            yield


# Shared by every service instance in the process
item_locks = ItemLockRegistry()
