"""
API schemas
Request bodies and the ORM -> JSON mapping for every resource

Money is Decimal in the database and in the promo engine; responses carry
plain JSON numbers, so output models declare money fields as float.
"""

from pydantic import AfterValidator, BaseModel, Field
from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal

from storefront.models.product import Product
from storefront.utils.formatting import as_utc

# Timestamps are stored as naive UTC; responses carry the offset
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class AdminOut(BaseModel):
    id: int
    username: str

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None

class CategoryUpdate(CategoryCreate):
    pass

class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str]
    icon: Optional[str]
    created_at: Optional[UtcDatetime]
    updated_at: Optional[UtcDatetime]

    class Config:
        from_attributes = True

class CategoryWithCount(CategoryOut):
    product_count: int = 0


class InputField(BaseModel):
    """One dynamic checkout form field"""
    name: str
    label: Optional[str] = None
    type: str = "text"
    required: bool = False
    placeholder: Optional[str] = None
    help: Optional[str] = None

class ProductCreate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    service_type: Optional[str] = None
    input_fields: Any = None  # list or JSON-encoded list
    enabled: Optional[bool] = None

class ProductUpdate(ProductCreate):
    pass

class ProductOut(BaseModel):
    id: int
    category_id: int
    name: str
    slug: str
    description: Optional[str]
    image_url: Optional[str]
    service_type: str
    input_fields: List[Dict[str, Any]]
    enabled: bool
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    created_at: Optional[UtcDatetime]
    updated_at: Optional[UtcDatetime]

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        category = product.category
        return cls(
            id=product.id,
            category_id=product.category_id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            image_url=product.image_url,
            service_type=product.service_type,
            input_fields=list(product.input_fields or []),
            enabled=bool(product.enabled),
            category_name=category.name if category else None,
            category_slug=category.slug if category else None,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class PackageCreate(BaseModel):
    product_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Decimal] = None
    download_url: Optional[str] = None
    file_type: Optional[str] = None
    enabled: Optional[bool] = None

class PackageUpdate(PackageCreate):
    pass

class PublicPackageOut(BaseModel):
    """Package as shown to shoppers; the download link stays private"""
    id: int
    product_id: int
    name: str
    description: Optional[str]
    image_url: Optional[str]
    price: float
    file_type: Optional[str]
    enabled: bool
    created_at: Optional[UtcDatetime]
    updated_at: Optional[UtcDatetime]

    class Config:
        from_attributes = True

class PackageOut(PublicPackageOut):
    download_url: Optional[str]


# ---------------------------------------------------------------------------
# Promo codes
# ---------------------------------------------------------------------------

class PromoCreate(BaseModel):
    code: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    min_purchase: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    enabled: Optional[bool] = None

class PromoUpdate(PromoCreate):
    pass

class PromoOut(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: float
    min_purchase: Optional[float]
    max_discount: Optional[float]
    usage_limit: Optional[int]
    usage_count: int
    start_date: Optional[UtcDatetime]
    end_date: Optional[UtcDatetime]
    enabled: bool
    created_at: Optional[UtcDatetime]
    updated_at: Optional[UtcDatetime]

    class Config:
        from_attributes = True

class PromoValidateRequest(BaseModel):
    code: Optional[str] = None
    price: Optional[Decimal] = None

class PromoValidationOut(BaseModel):
    valid: bool
    code: str
    discount_type: str
    discount_value: float
    discount_amount: float
    original_price: float
    final_price: float
    message: str


# ---------------------------------------------------------------------------
# Orders & checkout
# ---------------------------------------------------------------------------

class OrderCreate(BaseModel):
    product_id: Optional[int] = None
    package_id: Optional[int] = None
    user_data: Optional[Dict[str, Any]] = None
    payment_proof: Optional[str] = None
    promo_code: Optional[str] = None
    # Accepted for compatibility with the checkout page; recomputed server-side
    discount_amount: Optional[Decimal] = None
    final_price: Optional[Decimal] = None

class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None

class OrderOut(BaseModel):
    id: int
    product_id: int
    package_id: int
    product_name: str
    category_name: str
    package_name: str
    price: float
    original_price: Optional[float]
    discount_amount: Optional[float]
    promo_code: Optional[str]
    user_data: Dict[str, Any]
    payment_proof: Optional[str]
    status: str
    created_at: Optional[UtcDatetime]

    class Config:
        from_attributes = True

class CheckoutUrlRequest(BaseModel):
    product_id: Optional[int] = None
    package_id: Optional[int] = None
    user_data: Optional[Dict[str, Any]] = None
    payment_proof: Optional[str] = None
    promo_code: Optional[str] = None

class CheckoutUrlOut(BaseModel):
    url: str


# ---------------------------------------------------------------------------
# Settings, public pages, uploads
# ---------------------------------------------------------------------------

class SettingUpdate(BaseModel):
    value: Optional[Any] = None

class SettingOut(BaseModel):
    key: str
    value: str

    class Config:
        from_attributes = True

class PaymentSettingsOut(BaseModel):
    bank_name: str = ""
    account_number: str = ""
    account_name: str = ""
    qr_code: str = ""

class HomepageOut(BaseModel):
    categories: List[CategoryWithCount]
    featured_products: List[ProductOut] = Field(alias="featuredProducts")

    class Config:
        populate_by_name = True

class UploadOut(BaseModel):
    success: bool = True
    url: str
    filename: str
    original_name: Optional[str]
    size: int
