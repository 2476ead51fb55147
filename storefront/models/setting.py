"""
Setting model - free-form key/value store (WhatsApp number, templates, payment details)
"""

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from storefront.utils.database import Base

class Setting(Base):
    __tablename__ = "settings"
    
    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<Setting(key='{self.key}')>"
