"""
Product model - a sellable service inside a category (e.g. Mobile Legends top-up)
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from storefront.utils.database import Base

class Product(Base):
    __tablename__ = "products"
    
    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text)
    image_url = Column(String(500))
    service_type = Column(String(100), nullable=False)  # free text: "Game Top-Up", "E-Book", ...
    
    # Checkout form descriptors: [{name, label, type, required, placeholder, help}]
    input_fields = Column(JSON, nullable=False, default=list)
    enabled = Column(Boolean, nullable=False, default=True, index=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    category = relationship("Category", back_populates="products", lazy="joined")
    packages = relationship("Package", back_populates="product")
    
    def __repr__(self):
        return f"<Product(id={self.id}, slug='{self.slug}', category_id={self.category_id})>"
