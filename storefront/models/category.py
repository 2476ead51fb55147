"""
Category model - top level of the catalog (Game, Digital Subscription, ...)
"""

from sqlalchemy import Column, String, DateTime, Integer, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from storefront.utils.database import Base

class Category(Base):
    __tablename__ = "categories"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text)
    icon = Column(String(500))  # emoji or uploaded image path
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    products = relationship("Product", back_populates="category")
    
    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}')>"
