# models/catalog.py
"""
Catalog rows that invoice line items may point at.

Catalog management lives elsewhere; these mappings exist so that
invoice_line_items.item_id has a real foreign key target.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Category(Base):
     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(100), unique=True, nullable=False)
     description = Column(String(500), nullable=True)
     gst_rate = Column(Integer, nullable=False)

     items = relationship("Item", back_populates="category")

     def __repr__(self):
          return f"<Category(id={self.id}, name='{self.name}', gst_rate={self.gst_rate})>"


class Item(Base):
     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     description = Column(String(500), nullable=True)
     category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
     hsn_code = Column(String(20), nullable=True)
     unit = Column(String(20), default="pcs", nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     category = relationship("Category", back_populates="items")

     def __repr__(self):
          return f"<Item(id={self.id}, name='{self.name}')>"
