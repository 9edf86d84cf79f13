"""
Review data model.

Represents a user review as returned by the admin reviews endpoint.
Wire keys are Spanish (fecha, puntaje, detalle, usuario, venta); attributes
are not.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

UNKNOWN_PRODUCT = "Producto desconocido"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO date-time string from the API.

    Accepts a trailing 'Z' for UTC. Raises ValueError if unparseable.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_date(value: datetime) -> str:
    """Short es-ES date (d/m/yyyy, no zero padding), as shown in the admin table."""
    return f"{value.day}/{value.month}/{value.year}"


@dataclass(frozen=True)
class ProductRef:
    """A game, service or add-on referenced by a sale."""
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["ProductRef"]:
        if not data:
            return None
        return cls(id=data.get("id"), name=data.get("nombre") or "")


@dataclass(frozen=True)
class ReviewUser:
    """Reviewer shown next to each review."""
    id: int
    username: str  # nombreUsuario (handle)
    name: Optional[str] = None  # Display name, may be missing

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewUser":
        return cls(
            id=data.get("id"),
            username=data.get("nombreUsuario") or "",
            name=data.get("nombre"),
        )


@dataclass(frozen=True)
class Sale:
    """
    Purchase the review belongs to.

    At most one of game/service/addon is set. None of them set is valid and
    displays as an unknown product.
    """
    id: Optional[int] = None
    game: Optional[ProductRef] = None
    service: Optional[ProductRef] = None
    addon: Optional[ProductRef] = None
    activation_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Sale":
        data = data or {}
        return cls(
            id=data.get("id"),
            game=ProductRef.from_dict(data.get("juego")),
            service=ProductRef.from_dict(data.get("servicio")),
            addon=ProductRef.from_dict(data.get("complemento")),
            activation_code=data.get("codActivacion"),
        )

    @property
    def product_name(self) -> str:
        for product in (self.game, self.service, self.addon):
            if product and product.name:
                return product.name
        return UNKNOWN_PRODUCT


@dataclass(frozen=True)
class Review:
    """
    A review as seen by an administrator.

    Instances are never mutated; deletion produces a new collection.
    """
    id: int
    created_at: datetime  # fecha
    rating: int  # puntaje, 1-5
    comment: str  # detalle
    user: ReviewUser  # usuario
    sale: Sale  # venta

    def __post_init__(self):
        if not isinstance(self.rating, int) or not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5")

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """Create Review from the API JSON object."""
        return cls(
            id=data["id"],
            created_at=parse_timestamp(data["fecha"]),
            rating=data["puntaje"],
            comment=data.get("detalle") or "",
            user=ReviewUser.from_dict(data.get("usuario") or {}),
            sale=Sale.from_dict(data.get("venta")),
        )

    def to_dict(self) -> dict:
        """Flat, JSON-serializable row used by the CLI and the CSV export."""
        return {
            "id": self.id,
            "fecha": self.created_at.isoformat(),
            "puntaje": self.rating,
            "producto": self.product_name,
            "usuario": self.user.username,
            "nombre": self.user.name or "",
            "detalle": self.comment,
        }

    @property
    def product_name(self) -> str:
        return self.sale.product_name

    @property
    def rating_tier(self) -> str:
        """'high' (4-5), 'medium' (3) or 'low' (1-2)."""
        if self.rating >= 4:
            return "high"
        if self.rating >= 3:
            return "medium"
        return "low"
