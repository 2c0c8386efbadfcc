from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime, timezone
import uuid


def new_id():
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False, index=True)
    # lower-cased name, keeps names unique regardless of case
    name_key = Column(String(50), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    products = relationship("Product", back_populates="category")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, index=True)
    price = Column(Float, nullable=False, index=True)
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)
    in_stock = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    category = relationship("Category", back_populates="products", lazy="joined")
