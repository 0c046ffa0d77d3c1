# provide dataclass models for everything the backend sends back

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in dataclasses.fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _to_float(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


def _to_int(val) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Result:
    """
    Envelope every service call returns; callers branch on `success`,
    never on exceptions.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "Result":
        return cls(True, data, None)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "Result":
        return cls(False, data, error)


@dataclass(frozen=True)
class User:
    id: Optional[str]
    name: str
    role: Optional[str]  # "admin", "employee" or "customer" as assigned by backend
    phone: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        data = _known_fields(cls, data)
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        data.setdefault("id", None)
        data.setdefault("name", "")
        data.setdefault("role", None)
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def merged(self, changes: Dict[str, Any]) -> "User":
        return User.from_dict({**self.to_dict(), **changes})


@dataclass(frozen=True)
class Account:
    """A signed in user, identified by the backend account id."""

    id: str

    @property
    def key(self) -> str:
        return self.id


@dataclass(frozen=True)
class Guest:
    """An anonymous visitor, identified by a locally generated session id."""

    session_id: str

    @property
    def key(self) -> str:
        return self.session_id


Identity = Union[Account, Guest]


@dataclass(frozen=True)
class CartItem:
    item_id: str
    name: str
    price: float
    quantity: int
    item_total: float
    category: Optional[str] = None
    diet_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        return cls(
            item_id=str(data.get("item_id", "")),
            name=data.get("name", ""),
            price=_to_float(data.get("price")),
            quantity=_to_int(data.get("quantity")),
            item_total=_to_float(data.get("item_total")),
            category=data.get("category"),
            diet_type=data.get("diet_type"),
        )


@dataclass(frozen=True)
class Cart:
    """
    Server computed cart snapshot. Totals are never computed locally.
    """

    items: List[CartItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    item_count: int = 0

    @classmethod
    def empty(cls) -> "Cart":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cart":
        return cls(
            items=[CartItem.from_dict(i) for i in data.get("items") or []],
            subtotal=_to_float(data.get("subtotal")),
            tax=_to_float(data.get("tax")),
            total=_to_float(data.get("total")),
            item_count=_to_int(data.get("item_count")),
        )

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class MenuItem:
    item_id: str
    name: str
    price: float
    description: str = ""
    category: Optional[str] = None
    diet_type: Optional[str] = None  # "veg" or "non_veg"
    available: bool = True

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], category: str, diet_type: str
    ) -> "MenuItem":
        return cls(
            item_id=str(data.get("item_id") or data.get("id") or ""),
            name=data.get("name", ""),
            price=_to_float(data.get("price")),
            description=data.get("description") or "",
            category=data.get("category") or category,
            diet_type=data.get("diet_type") or diet_type,
            available=bool(data.get("available", True)),
        )


@dataclass(frozen=True)
class MenuCategory:
    category_name: str
    veg: List[MenuItem] = field(default_factory=list)
    non_veg: List[MenuItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MenuCategory":
        name = data.get("category_name", "")
        return cls(
            category_name=name,
            veg=[MenuItem.from_dict(i, name, "veg") for i in data.get("veg") or []],
            non_veg=[
                MenuItem.from_dict(i, name, "non_veg")
                for i in data.get("non_veg") or []
            ],
        )

    @property
    def items(self) -> List[MenuItem]:
        return [*self.veg, *self.non_veg]


@dataclass(frozen=True)
class Order:
    order_id: str
    items: List[Dict[str, Any]]
    total: float
    status: str  # owned by the backend, never transitioned locally
    order_type: Optional[str] = None
    payment_method: Optional[str] = None
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            order_id=str(data.get("order_id", "")),
            items=list(data.get("items") or []),
            total=_to_float(data.get("total")),
            status=data.get("status") or "pending",
            order_type=data.get("order_type") or data.get("type"),
            payment_method=data.get("payment_method"),
            delivery_address=data.get("delivery_address"),
            special_instructions=data.get("special_instructions"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class CheckoutRequest:
    order_type: str
    payment_method: str
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None


@dataclass(frozen=True)
class EventBooking:
    event_type: str
    date: str  # ISO date, YYYY-MM-DD
    time: str  # HH:MM
    guests: int
    package: str = "Standard"
    special_requests: Optional[str] = None


@dataclass(frozen=True)
class Event:
    event_id: str
    title: str
    event_type: str
    date: str
    time: str
    guests: int
    status: str
    package: Optional[str] = None
    cost: float = 0.0
    special_requests: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            event_id=str(data.get("event_id") or data.get("id") or ""),
            title=data.get("title") or "",
            event_type=data.get("event_type") or data.get("type") or "other",
            date=data.get("date") or "",
            time=data.get("time") or "",
            guests=_to_int(data.get("guests")),
            status=data.get("status") or "pending",
            package=data.get("package"),
            cost=_to_float(data.get("cost")),
            special_requests=data.get("special_requests"),
        )
