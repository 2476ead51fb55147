"""
Package model - a purchasable price tier of a product (e.g. "100 Diamonds")
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text, ForeignKey, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from storefront.utils.database import Base

class Package(Base):
    __tablename__ = "packages"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    image_url = Column(String(500))
    price = Column(Numeric(14, 2), nullable=False)
    
    # Digital goods only
    download_url = Column(String(1000))
    file_type = Column(String(50))  # pdf, zip, psd, ...
    
    enabled = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    product = relationship("Product", back_populates="packages")
    
    def __repr__(self):
        return f"<Package(id={self.id}, product_id={self.product_id}, price={self.price})>"
