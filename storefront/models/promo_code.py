"""
Promo code model - discount vouchers with date window and usage cap
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Numeric, CheckConstraint
from sqlalchemy.sql import func
from storefront.utils.database import Base
import enum

class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class PromoCode(Base):
    __tablename__ = "promo_codes"
    
    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, index=True, nullable=False)  # always stored uppercase
    discount_type = Column(String(20), nullable=False)  # DiscountType enum
    discount_value = Column(Numeric(14, 2), nullable=False)
    min_purchase = Column(Numeric(14, 2))
    max_discount = Column(Numeric(14, 2))  # caps percentage discounts only
    
    usage_limit = Column(Integer)
    usage_count = Column(Integer, nullable=False, default=0)
    
    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True))
    enabled = Column(Boolean, nullable=False, default=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    __table_args__ = (
        CheckConstraint('usage_count >= 0', name='ck_promo_codes_usage_count_nonneg'),
    )
    
    def __repr__(self):
        return f"<PromoCode(code='{self.code}', type='{self.discount_type}', used={self.usage_count}/{self.usage_limit})>"
