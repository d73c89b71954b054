"""Domain service: Catalog Mapper.

Turns raw supplier records into storefront ``Service`` entries: applies the
price markup, converts unit bounds into thousands, infers platform and
category from the service name and derives the display fields.

Platform and category inference use explicit ordered rule tables; the first
rule whose keyword appears in the lower-cased name wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.pricing import MARKUP_MULTIPLIER, UNITS_PER_QUANTITY
from storefront.domain.model.service import Service
from storefront.domain.model.value_objects import Money, parse_decimal

Rule = tuple[tuple[str, ...], str]

PLATFORM_RULES: tuple[Rule, ...] = (
    (("tiktok", "tik tok"), "tiktok"),
    (("youtube",), "youtube"),
    (("facebook",), "facebook"),
    (("twitter",), "twitter"),
    (("telegram",), "telegram"),
    (("twitch",), "twitch"),
    (("kwai",), "kwai"),
    (("threads",), "threads"),
)
DEFAULT_PLATFORM = "instagram"

CATEGORY_RULES: tuple[Rule, ...] = (
    (("curtida", "like"), "likes"),
    (("visualiza", "view"), "views"),
    (("inscrit", "subscriber", "membros"), "subscribers"),
    (("comentário", "comment"), "comments"),
    (("compartilh", "share", "salves"), "shares"),
)
DEFAULT_CATEGORY = "followers"

# Display lists for the storefront filters (id, label).
CATEGORIES: tuple[tuple[str, str], ...] = (
    ("all", "Todos os Serviços"),
    ("followers", "Seguidores"),
    ("likes", "Curtidas"),
    ("views", "Visualizações"),
    ("subscribers", "Inscritos"),
    ("comments", "Comentários"),
    ("shares", "Compartilhamentos"),
)
PLATFORMS: tuple[tuple[str, str], ...] = (
    ("all", "Todas as Redes"),
    ("instagram", "Instagram"),
    ("tiktok", "TikTok"),
    ("youtube", "YouTube"),
    ("facebook", "Facebook"),
    ("twitter", "Twitter"),
    ("telegram", "Telegram"),
    ("twitch", "Twitch"),
    ("kwai", "Kwai"),
    ("threads", "Threads"),
)

BASE_FEATURES = ("Entrega rápida", "Alta qualidade", "Suporte 24h", "Garantia total")
REFILL_FEATURE = "Reposição automática"
CANCEL_FEATURE = "Cancelamento disponível"

DEFAULT_DELIVERY_TIME = "30-50 minutos"
DELIVERY_TIME_BY_CATEGORY = {
    "likes": "5-30 minutos",
    "views": "5-30 minutos",
    "comments": "1-6 horas",
}

DEFAULT_MIN_QUANTITY = 1
DEFAULT_MAX_QUANTITY = 10

POPULAR_PRICE_THRESHOLD = Money(Decimal("10"))
POPULAR_CATEGORIES = frozenset({"likes", "views"})

# Data-quality gate applied to every mapped batch.
MAX_PLAUSIBLE_PRICE = Money(Decimal("1000"))
MIN_NAME_LENGTH = 6
INTERNAL_MARKERS = ("SERVIÇO INTERNO",)


@dataclass(frozen=True)
class CatalogRecord:
    """A raw service record as returned by the supplier panel."""

    service_id: int | str
    name: str
    rate: str
    min: str
    max: str
    refill: bool = False
    cancel: bool = False
    type: str = ""
    category: str = ""
    delivery_time: str | None = None


@dataclass
class MappingResult:
    services: list[Service] = field(default_factory=list)
    invalid: list[tuple[CatalogRecord, str]] = field(default_factory=list)
    filtered_out: int = 0


def classify(name: str, rules: tuple[Rule, ...], default: str) -> str:
    lowered = name.lower()
    for keywords, result in rules:
        if any(keyword in lowered for keyword in keywords):
            return result
    return default


def map_record(record: CatalogRecord) -> Service:
    """Map one supplier record. Raises ValidationError on a non-numeric rate."""
    try:
        rate = parse_decimal(record.rate)
    except ValidationError as exc:
        raise ValidationError(
            f"Service {record.service_id} has a non-numeric rate: {record.rate!r}"
        ) from exc
    if rate < 0:
        raise ValidationError(f"Service {record.service_id} has a negative rate")

    price = Money(rate * MARKUP_MULTIPLIER).rounded()
    platform = classify(record.name, PLATFORM_RULES, DEFAULT_PLATFORM)
    category = classify(record.name, CATEGORY_RULES, DEFAULT_CATEGORY)

    min_quantity = _thousands(record.min, DEFAULT_MIN_QUANTITY)
    max_quantity = max(_thousands(record.max, DEFAULT_MAX_QUANTITY), min_quantity)

    features = list(BASE_FEATURES)
    if record.refill:
        features.append(REFILL_FEATURE)
    if record.cancel:
        features.append(CANCEL_FEATURE)

    delivery_time = record.delivery_time or DELIVERY_TIME_BY_CATEGORY.get(
        category, DEFAULT_DELIVERY_TIME
    )

    return Service(
        id=f"api-{record.service_id}",
        name=record.name,
        description=(
            f"{record.name} - Serviço de alta qualidade para {platform}. "
            "Melhore sua presença online com resultados garantidos."
        ),
        price=price,
        category=category,
        platform=platform,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        delivery_time=delivery_time,
        features=tuple(features),
        popular=price < POPULAR_PRICE_THRESHOLD and category in POPULAR_CATEGORIES,
        external_service_id=_external_id(record.service_id),
    )


def is_sellable(service: Service) -> bool:
    """Data-quality gate for mapped services."""
    if not Money.zero() < service.price < MAX_PLAUSIBLE_PRICE:
        return False
    if len(service.name) < MIN_NAME_LENGTH:
        return False
    name = service.name.casefold()
    return not any(marker.casefold() in name for marker in INTERNAL_MARKERS)


def filter_catalog(services: list[Service]) -> list[Service]:
    return [service for service in services if is_sellable(service)]


def map_catalog(records: list[CatalogRecord]) -> MappingResult:
    """Map a whole supplier batch, then apply the quality gate to all of it."""
    result = MappingResult()
    mapped: list[Service] = []
    for record in records:
        try:
            mapped.append(map_record(record))
        except ValidationError as exc:
            result.invalid.append((record, str(exc)))

    result.services = filter_catalog(mapped)
    result.filtered_out = len(mapped) - len(result.services)
    return result


# --- Internal helpers ---------------------------------------------------------


def _thousands(raw: str, default: int) -> int:
    try:
        units = parse_decimal(raw)
    except ValidationError:
        return default
    return max(1, int(units // UNITS_PER_QUANTITY))


def _external_id(service_id: int | str) -> int | None:
    try:
        return int(service_id)
    except (TypeError, ValueError):
        return None
