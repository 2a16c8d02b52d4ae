from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from voice_agent.rpc.protocol import SAVE_QUOTATION, QUOTATION_UPDATE

DEFAULT_CUSTOMER = "Voice Customer"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DraftItem(BaseModel):
    name: str
    qty: int = Field(..., gt=0)
    rate: float = Field(..., ge=0)

    @property
    def subtotal(self) -> float:
        return round(self.qty * self.rate, 2)

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "qty": self.qty, "rate": self.rate, "subtotal": self.subtotal}


class QuotationDraft(BaseModel):
    """
    The quotation being dictated in a voice session.
    Every mutation refreshes `timestamp` so the browser can tell updates apart.
    """
    customer: Optional[str] = None
    items: List[DraftItem] = Field(default_factory=list)
    timestamp: str = Field(default_factory=_now_iso)

    @property
    def total(self) -> float:
        return round(sum(i.subtotal for i in self.items), 2)

    def is_empty(self) -> bool:
        return not self.items and not self.customer

    def find(self, name: str) -> Optional[DraftItem]:
        key = name.strip().lower()
        for item in self.items:
            if item.name.lower() == key:
                return item
        return None

    def _touch(self) -> None:
        self.timestamp = _now_iso()

    # ------------------ mutations ------------------

    def set_customer(self, name: str) -> None:
        self.customer = name.strip() or None
        self._touch()

    def add_item(self, name: str, qty: int, rate: float) -> DraftItem:
        name = name.strip()
        if not name:
            raise ValueError("Item name is required")
        _check(qty, rate)

        existing = self.find(name)
        if existing is not None:
            # same product spoken again: the quantity accumulates, the latest rate wins
            existing.qty += int(qty)
            existing.rate = float(rate)
            self._touch()
            return existing

        item = DraftItem(name=name, qty=int(qty), rate=float(rate))
        self.items.append(item)
        self._touch()
        return item

    def update_item(
        self, name: str, qty: Optional[int] = None, rate: Optional[float] = None
    ) -> DraftItem:
        item = self.find(name)
        if item is None:
            raise ValueError(f"No item named '{name}' in the quotation")
        _check(qty if qty is not None else item.qty, rate if rate is not None else item.rate)
        if qty is not None:
            item.qty = int(qty)
        if rate is not None:
            item.rate = float(rate)
        self._touch()
        return item

    def remove_item(self, name: str) -> DraftItem:
        item = self.find(name)
        if item is None:
            raise ValueError(f"No item named '{name}' in the quotation")
        self.items.remove(item)
        self._touch()
        return item

    def clear(self) -> None:
        self.customer = None
        self.items = []
        self._touch()

    # ------------------ wire messages ------------------

    def to_update_message(self) -> Dict[str, Any]:
        return {
            "type": QUOTATION_UPDATE,
            "data": {
                "customer": self.customer or "",
                "items": [i.as_dict() for i in self.items],
                "total": self.total,
                "timestamp": self.timestamp,
            },
        }

    def to_save_message(self) -> Dict[str, Any]:
        return {
            "type": SAVE_QUOTATION,
            "data": {
                "customer": self.customer or DEFAULT_CUSTOMER,
                "quotation_data": [
                    {"product_name": i.name, "quantity": i.qty, "per_item_price": i.rate}
                    for i in self.items
                ],
                "total_amount": self.total,
            },
        }

    def summary(self) -> str:
        if not self.items:
            return f"The quotation for {self.customer or 'the customer'} has no items yet."
        lines = [f"{i.qty} x {i.name} at {i.rate:g} = {i.subtotal:g}" for i in self.items]
        return (
            f"Quotation for {self.customer or DEFAULT_CUSTOMER}: "
            + "; ".join(lines)
            + f". Total {self.total:g}."
        )


def _check(qty: Any, rate: Any) -> None:
    if isinstance(qty, bool) or int(qty) != qty or int(qty) <= 0:
        raise ValueError("Quantity must be a positive whole number")
    if float(rate) < 0:
        raise ValueError("Rate cannot be negative")
