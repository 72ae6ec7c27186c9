"""Service catalog.

Entries are fixed at deploy time; bookings keep their own snapshot of the
selected entries so later price edits never touch past bookings.
"""

from decimal import Decimal

from backend.app.core.errors import InvalidInput
from backend.app.models import ServiceItem


def _manicure(id: str, name: str, name_vi: str, name_de: str, price: str, duration: int, **kw) -> ServiceItem:
    return ServiceItem(
        id=id, name=name, name_vi=name_vi, name_de=name_de,
        price=Decimal(price), duration=duration,
        category="Manicure", category_vi="Làm móng tay", category_de="Maniküre", **kw,
    )


def _pedicure(id: str, name: str, name_vi: str, name_de: str, price: str, duration: int, **kw) -> ServiceItem:
    return ServiceItem(
        id=id, name=name, name_vi=name_vi, name_de=name_de,
        price=Decimal(price), duration=duration,
        category="Pedicure", category_vi="Làm móng chân", category_de="Pediküre", **kw,
    )


def _extras(id: str, name: str, name_vi: str, name_de: str, price: str, duration: int, **kw) -> ServiceItem:
    return ServiceItem(
        id=id, name=name, name_vi=name_vi, name_de=name_de,
        price=Decimal(price), duration=duration,
        category="Extras", category_vi="Dịch vụ thêm", category_de="Extras", **kw,
    )


SERVICES: tuple[ServiceItem, ...] = (
    _manicure("mani-classic", "Classic manicure", "Làm móng tay cơ bản", "Klassische Maniküre", "25", 30),
    _manicure("mani-shellac", "Shellac manicure", "Sơn gel tay", "Shellac Maniküre", "35", 45),
    _manicure("gel-new", "Gel nails, new set", "Đắp gel bộ mới", "Gelnägel Neumodellage", "45", 75),
    _manicure("gel-refill", "Gel nails, refill", "Dặm gel", "Gelnägel Auffüllen", "38", 60),
    _pedicure("pedi-classic", "Classic pedicure", "Làm móng chân cơ bản", "Klassische Pediküre", "30", 40),
    _pedicure("pedi-shellac", "Shellac pedicure", "Sơn gel chân", "Shellac Pediküre", "40", 50),
    _pedicure("pedi-spa", "Spa pedicure", "Spa chân", "Spa Pediküre", "48", 60),
    _extras("nail-art", "Nail art", "Vẽ móng", "Nageldesign", "5", 15, price_from=True),
    _extras("removal", "Removal", "Tháo gel", "Ablösen", "10", 15),
    _extras("repair", "Nail repair", "Sửa móng", "Nagelreparatur", "5", 10, price_from=True),
)

_BY_ID: dict[str, ServiceItem] = {service.id: service for service in SERVICES}


def get_service(service_id: str) -> ServiceItem:
    try:
        return _BY_ID[service_id]
    except KeyError:
        raise InvalidInput(f"Unknown service {service_id!r}", field="services") from None


def resolve_services(service_ids: list[str]) -> tuple[ServiceItem, ...]:
    """Map selected ids onto catalog entries, keeping the customer's order."""
    if not service_ids:
        raise InvalidInput("At least one service must be selected", field="services")
    return tuple(get_service(service_id) for service_id in service_ids)


def totals(services: tuple[ServiceItem, ...]) -> tuple[Decimal, int]:
    """Return (total price, total duration in minutes) for a selection."""
    return (
        sum((service.price for service in services), Decimal("0")),
        sum(service.duration for service in services),
    )
