"""Menu item domain model: maps to the 'menu_items' table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from qrbites.infrastructure.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"
    __table_args__ = (
        Index("ix_menu_items_menu_available", "menu_id", "is_available"),
        Index("ix_menu_items_menu_category", "menu_id", "category"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    is_available = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(1000), nullable=True)
    allergens = Column(JSON, nullable=False, default=list)
    calories = Column(Integer, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    menu = relationship("Menu", back_populates="menu_items")

    def __repr__(self):
        return f"<MenuItem {self.name} ({self.price})>"
