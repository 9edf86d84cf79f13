"""
Checkout data models.

Typed views over the checkout endpoint payloads. These carry no logic beyond
parsing the `data` envelope contents.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProductType(str, Enum):
    GAME = "juego"
    SERVICE = "servicio"
    ADDON = "complemento"


def _ref_id(data: dict, key: str) -> Optional[int]:
    ref = data.get(key)
    return ref.get("id") if ref else None


@dataclass(frozen=True)
class SaleRecord:
    """Minimal sale (venta) returned once a purchase is paid."""
    id: int
    activation_code: str  # codActivacion
    date: str  # fecha, kept as the ISO string the API sends
    game_id: Optional[int] = None
    service_id: Optional[int] = None
    addon_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SaleRecord":
        return cls(
            id=data["id"],
            activation_code=data.get("codActivacion", ""),
            date=data.get("fecha", ""),
            game_id=_ref_id(data, "juego"),
            service_id=_ref_id(data, "servicio"),
            addon_id=_ref_id(data, "complemento"),
        )

    @property
    def product(self) -> Optional[ProductType]:
        if self.game_id is not None:
            return ProductType.GAME
        if self.service_id is not None:
            return ProductType.SERVICE
        if self.addon_id is not None:
            return ProductType.ADDON
        return None


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    status: str  # Always "pending" on start

    @classmethod
    def from_dict(cls, data: dict) -> "CheckoutSession":
        return cls(session_id=data["sessionId"], status=data.get("status", "pending"))


@dataclass(frozen=True)
class PaymentConfirmation:
    """Result of confirming a payment, simulated or through Mercado Pago."""
    status: str  # "paid"
    sale: SaleRecord

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentConfirmation":
        return cls(status=data["status"], sale=SaleRecord.from_dict(data["venta"]))


@dataclass(frozen=True)
class CheckoutStatus:
    status: str  # "pending", "paid" or "cancelled"
    sale_id: Optional[int] = None

    def __post_init__(self):
        if self.status not in ("pending", "paid", "cancelled"):
            raise ValueError(f"Invalid checkout status: {self.status}")

    @classmethod
    def from_dict(cls, data: dict) -> "CheckoutStatus":
        return cls(status=data["status"], sale_id=data.get("ventaId"))


@dataclass(frozen=True)
class ProviderPreference:
    """Mercado Pago payment preference; init_point is the redirect URL."""
    id: str
    init_point: str

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderPreference":
        return cls(id=data["id"], init_point=data["init_point"])


@dataclass(frozen=True)
class ProviderResult:
    status: str  # "paid" or "pending"
    sale: Optional[SaleRecord] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderResult":
        venta = data.get("venta")
        return cls(
            status=data["status"],
            sale=SaleRecord.from_dict(venta) if venta else None,
        )
