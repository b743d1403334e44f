# models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from .base import Base


class User(Base):
     """
     User model - a registered party that can issue or receive invoices.
     Rows are owned by the identity service; invoicing only reads them.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     name = Column(String(255), nullable=False)
     company_name = Column(String(255), nullable=True)
     gstin = Column(String(15), nullable=True)
     is_admin = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', is_admin={self.is_admin})>"
