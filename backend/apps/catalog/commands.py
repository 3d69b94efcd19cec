from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from apps.api.exceptions import InputValidationError
from apps.common.parsing import MAX_INT_COLUMN, as_int, fits_int_column

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

PRICE_QUANTUM = Decimal("0.01")
MAX_PRICE = Decimal("100000000")

SORT_DIRECTIONS = {"asc": "price", "desc": "-price"}
STATUS_QUERIES = {"available": True, "unavailable": False}

# Order matters: missing fields are reported in this order.
REQUIRED_PRODUCT_FIELDS = ("title", "price", "code", "stock", "category")
# Numeric fields where 0 is a legitimate value rather than "missing".
ZERO_ALLOWED_FIELDS = frozenset({"price", "stock"})
MAX_LENGTHS = {"title": 255, "code": 64, "category": 100}


def parse_positive_int(raw: Any, default: int) -> int:
    """Parse a positive integer, falling back to ``default`` for anything else."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except (ValueError, TypeError):
        return default
    return value if value > 0 else default


@dataclass
class ProductListQuery:
    limit: int
    page: int
    sort: Optional[str] = None
    query: Optional[str] = None
    # Values exactly as received, echoed back in navigation links
    raw_sort: Optional[str] = None
    raw_query: Optional[str] = None

    @property
    def filters(self) -> Dict[str, Any]:
        if self.query is None:
            return {}
        if self.query in STATUS_QUERIES:
            return {"status": STATUS_QUERIES[self.query]}
        return {"category": self.query}

    @property
    def ordering(self) -> List[str]:
        # Primary key as tie-breaker keeps page boundaries stable
        if self.sort in SORT_DIRECTIONS:
            return [SORT_DIRECTIONS[self.sort], "id"]
        return ["id"]

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @staticmethod
    def from_raw(
        limit: Any = None,
        page: Any = None,
        sort: Any = None,
        query: Any = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
    ):
        raw_sort = str(sort) if sort not in (None, "") else None
        raw_query = str(query) if query not in (None, "") else None
        applied_query = raw_query if raw_query and raw_query.strip() else None
        return ProductListQuery(
            limit=parse_positive_int(limit, default_limit),
            page=parse_positive_int(page, DEFAULT_PAGE),
            sort=raw_sort if raw_sort in SORT_DIRECTIONS else None,
            query=applied_query,
            raw_sort=raw_sort,
            raw_query=raw_query,
        )


@dataclass
class ProductCreateCommand:
    title: str
    price: Decimal
    code: str
    stock: int
    category: str
    description: str = ""
    status: bool = True
    thumbnails: List[str] = field(default_factory=list)

    @staticmethod
    def missing_fields(data: Dict[str, Any]) -> List[str]:
        missing = []
        for name in REQUIRED_PRODUCT_FIELDS:
            value = data.get(name)
            if name in ZERO_ALLOWED_FIELDS:
                if value is None or (isinstance(value, str) and not value.strip()):
                    missing.append(name)
                continue
            if isinstance(value, str):
                value = value.strip()
            if not value:
                missing.append(name)
        return missing

    @staticmethod
    def _parse_price(raw: Any) -> Decimal:
        if isinstance(raw, bool):
            raise InputValidationError(
                "price must be a number greater than or equal to 0",
                {"field": "price", "value": raw},
            )
        try:
            price = Decimal(str(raw).strip())
        except (InvalidOperation, ValueError):
            price = None
        if price is None or not price.is_finite() or price < 0:
            raise InputValidationError(
                "price must be a number greater than or equal to 0",
                {"field": "price", "value": str(raw)},
            )
        # Column is NUMERIC(10, 2)
        if price >= MAX_PRICE:
            raise InputValidationError(
                f"price must be lower than {MAX_PRICE}",
                {"field": "price", "value": str(raw)},
            )
        return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)

    @staticmethod
    def _parse_stock(raw: Any) -> int:
        stock = as_int(raw)
        if stock is None or not fits_int_column(stock):
            raise InputValidationError(
                f"stock must be an integer between 0 and {MAX_INT_COLUMN}",
                {"field": "stock", "value": str(raw)},
            )
        return stock

    @staticmethod
    def _parse_status(raw: Any) -> bool:
        if raw is None:
            return True
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
            return raw.strip().lower() == "true"
        raise InputValidationError(
            "status must be a boolean", {"field": "status", "value": str(raw)}
        )

    @staticmethod
    def _parse_thumbnails(raw: Any) -> List[str]:
        if raw is None:
            return []
        if not isinstance(raw, (list, tuple)) or not all(
            isinstance(t, str) for t in raw
        ):
            raise InputValidationError(
                "thumbnails must be a list of strings", {"field": "thumbnails"}
            )
        return [t.strip() for t in raw if t.strip()]

    @staticmethod
    def from_raw(payload: Dict[str, Any]):
        if not isinstance(payload, dict):
            raise InputValidationError("Product payload must be an object")
        data = dict(payload)
        # ignore id if present; the store assigns it
        data.pop("id", None)
        missing = ProductCreateCommand.missing_fields(data)
        if missing:
            raise InputValidationError(
                f"Missing required fields: {', '.join(missing)}",
                {"missing": missing},
            )
        for name, max_length in MAX_LENGTHS.items():
            if len(str(data[name]).strip()) > max_length:
                raise InputValidationError(
                    f"{name} must be at most {max_length} characters",
                    {"field": name},
                )
        return ProductCreateCommand(
            title=str(data["title"]).strip(),
            price=ProductCreateCommand._parse_price(data["price"]),
            code=str(data["code"]).strip(),
            stock=ProductCreateCommand._parse_stock(data["stock"]),
            category=str(data["category"]).strip(),
            description=str(data.get("description") or "").strip(),
            status=ProductCreateCommand._parse_status(data.get("status")),
            thumbnails=ProductCreateCommand._parse_thumbnails(data.get("thumbnails")),
        )
