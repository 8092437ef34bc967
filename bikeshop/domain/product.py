from pydantic import Field

from .base import BaseDomainModel


class ProductDomain(BaseDomainModel):
    """
    The pure domain representation of a Product (a bicycle or accessory).

    Pricing rules (purchase price above zero, sale price above purchase
    price, commission between 0 and 100 percent) are enforced by the
    product validator rather than here, so invalid drafts can still be
    reported field by field.

    Attributes:
        id (int | None): Store-assigned identifier.
        name (str): Product name.
        manufacturer (str): Brand or maker.
        style (str): Style or category, e.g. Road, Mountain.
        purchase_price (float): What the shop paid per unit, in dollars.
        sale_price (float): Retail price per unit, in dollars.
        qty_on_hand (int): Units in stock.
        commission_percentage (float): Salesperson commission, 0-100.
    """

    id: int | None = None
    name: str = Field("", description="Name of the product")
    manufacturer: str = Field("", description="Manufacturer of the product")
    style: str = Field("", description="Style of the product")
    purchase_price: float = Field(0.0, description="Unit purchase price in USD")
    sale_price: float = Field(0.0, description="Unit sale price in USD")
    qty_on_hand: int = Field(0, description="Units currently in stock")
    commission_percentage: float = Field(0.0, description="Commission paid on each sale, in percent")

    def commission_amount(self) -> float:
        """
        Calculates the commission earned on a single sale of this product.

        Returns:
            float: sale_price * commission_percentage / 100, unrounded.
        """
        return self.sale_price * self.commission_percentage / 100

    def get_formatted_price(self) -> str:
        """
        Returns the sale price as a human-readable currency string.

        Returns:
            str: The price formatted as '$XX.XX'.
        """
        return f"${self.sale_price:,.2f}"

    model_config = {
        **BaseDomainModel.model_config,
        "json_schema_extra": {
            "example": {
                "name": "Allez Sport",
                "manufacturer": "Specialized",
                "style": "Road",
                "purchasePrice": 800.0,
                "salePrice": 1200.0,
                "qtyOnHand": 4,
                "commissionPercentage": 8.5
            }
        }
    }
