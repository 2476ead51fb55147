"""
Order model - immutable snapshot of a checkout
"""

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Numeric, JSON
from sqlalchemy.sql import func
from storefront.utils.database import Base
import enum

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Order(Base):
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False, index=True)
    
    # Names and price captured at order time; later catalog edits don't touch them
    product_name = Column(String(255), nullable=False)
    category_name = Column(String(255), nullable=False)
    package_name = Column(String(255), nullable=False)
    price = Column(Numeric(14, 2), nullable=False)  # amount to pay
    original_price = Column(Numeric(14, 2))
    discount_amount = Column(Numeric(14, 2))
    promo_code = Column(String(50))
    
    user_data = Column(JSON, nullable=False)  # checkout form answers
    payment_proof = Column(String(500))
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING, index=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    
    def __repr__(self):
        return f"<Order(id={self.id}, product='{self.product_name}', status='{self.status}')>"
