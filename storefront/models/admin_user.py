"""
Admin user model - single-role back office login
"""

from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.sql import func
from storefront.utils.database import Base

class AdminUser(Base):
    __tablename__ = "admin_users"
    
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)  # bcrypt hash
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    def __repr__(self):
        return f"<AdminUser(id={self.id}, username='{self.username}')>"
