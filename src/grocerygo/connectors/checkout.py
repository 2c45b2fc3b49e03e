"""Export a grocery list to the delivery partner's checkout flow."""

from collections.abc import Iterable

import httpx
from pydantic import BaseModel, Field

from grocerygo.config import get_settings
from grocerygo.connectors.base import ConnectorError, HttpConnector
from grocerygo.logging_config import get_logger
from grocerygo.normalize.quantity import format_quantity
from grocerygo.schemas import CalculatedGroceryItem

logger = get_logger(__name__)

DEFAULT_UNIT = "count"
CHECKOUT_INSTRUCTIONS = [
    "These ingredients are for your weekly meal plan from GroceryGo",
    "Feel free to adjust quantities based on your preferences",
]


class CheckoutError(ConnectorError):
    """Raised when a checkout link cannot be created."""


class LineItemMeasurement(BaseModel):
    quantity: float
    unit: str


class LineItemFilters(BaseModel):
    brand_filters: list[str] = Field(default_factory=list)
    health_filters: list[str] = Field(default_factory=list)


class LineItem(BaseModel):
    """One product line of a checkout shopping list."""

    name: str
    quantity: float
    unit: str
    display_text: str
    line_item_measurements: list[LineItemMeasurement]
    filters: LineItemFilters = Field(default_factory=LineItemFilters)


class LandingPageConfiguration(BaseModel):
    partner_linkback_url: str
    enable_pantry_items: bool = True


class ShoppingListData(BaseModel):
    """Request body for the products-link endpoint."""

    title: str
    link_type: str = "shopping_list"
    expires_in: int = 1  # days
    instructions: list[str] = Field(default_factory=lambda: list(CHECKOUT_INSTRUCTIONS))
    line_items: list[LineItem]
    landing_page_configuration: LandingPageConfiguration


def to_line_item(item: CalculatedGroceryItem) -> LineItem:
    """Reshape one grocery row into a checkout line item."""
    quantity = item.quantity or 1
    unit = item.unit or DEFAULT_UNIT
    return LineItem(
        name=item.item_name,
        quantity=quantity,
        unit=unit,
        display_text=f"{format_quantity(quantity)} {unit} {item.item_name}",
        line_item_measurements=[LineItemMeasurement(quantity=quantity, unit=unit)],
    )


def to_line_items(items: Iterable[CalculatedGroceryItem]) -> list[LineItem]:
    return [to_line_item(item) for item in items]


class CheckoutClient(HttpConnector):
    """Client for the delivery partner's shopping-list link API."""

    error_class = CheckoutError

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.checkout_api_key
        self.api_url = api_url or settings.checkout_api_url
        self.expires_in_days = settings.checkout_link_expiry_days
        self.linkback_url = settings.checkout_linkback_url
        super().__init__(
            timeout=timeout or settings.checkout_timeout,
            max_retries=settings.checkout_max_retries,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def create_shopping_list_link(
        self,
        title: str,
        items: Iterable[CalculatedGroceryItem],
        linkback_url: str | None = None,
    ) -> str:
        """
        Create a hosted shopping list and return its checkout URL.

        Args:
            title: Title shown on the partner's landing page.
            items: Grocery rows to add to the cart.
            linkback_url: Page the partner links back to; defaults to the dashboard.

        Raises:
            CheckoutError: If no API key is configured, the request fails, or
                the response carries no link.
        """
        if not self.api_key:
            raise CheckoutError("Checkout API key is not configured")

        line_items = to_line_items(items)
        if not line_items:
            raise CheckoutError("Cannot create a checkout link for an empty grocery list")

        payload = ShoppingListData(
            title=title,
            expires_in=self.expires_in_days,
            line_items=line_items,
            landing_page_configuration=LandingPageConfiguration(
                partner_linkback_url=linkback_url or self.linkback_url,
            ),
        )

        logger.info(f"Creating checkout link '{title}' with {len(line_items)} line items")
        response = await self._request(
            "POST",
            self.api_url,
            json=payload.model_dump(),
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

        link = response.data.get("products_link_url") if isinstance(response.data, dict) else None
        if not link:
            raise CheckoutError(
                "Checkout response did not include a products link",
                status_code=response.status_code,
                response=response.data,
            )

        logger.info("Checkout link created")
        return link
