"""Menu domain model: maps to the 'menus' table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from qrbites.infrastructure.database import Base


class Menu(Base):
    __tablename__ = "menus"
    __table_args__ = (Index("ix_menus_restaurant_active", "restaurant_id", "is_active"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    categories = Column(JSON, nullable=False, default=list)
    image_url = Column(String(1000), nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)
    qr_code_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="menus")
    menu_items = relationship(
        "MenuItem",
        back_populates="menu",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[MenuItem.created_at, MenuItem.id]",
    )

    def __repr__(self):
        return f"<Menu {self.id} - {self.name}>"
