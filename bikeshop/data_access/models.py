from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel

# --- Dimension Tables ---

class DimCustomer(SQLModel, table=True):
    __tablename__ = "dim_customer"
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    address: str
    phone: str
    start_date: date

class DimProduct(SQLModel, table=True):
    __tablename__ = "dim_product"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    manufacturer: str = Field(index=True)
    style: str
    purchase_price: float
    sale_price: float
    qty_on_hand: int = Field(default=0)
    commission_percentage: float

class DimSalesPerson(SQLModel, table=True):
    __tablename__ = "dim_sales_person"
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    address: str
    phone: str = Field(index=True)
    start_date: date
    termination_date: Optional[date] = None
    manager: str

# --- Fact Table ---

class FactSale(SQLModel, table=True):
    """
    One sale transaction. Rows are inserted once and never updated.
    """
    __tablename__ = "fact_sale"
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="dim_product.id", index=True)
    sales_person_id: int = Field(foreign_key="dim_sales_person.id", index=True)
    customer_id: int = Field(foreign_key="dim_customer.id", index=True)
    sale_date: date = Field(index=True)
