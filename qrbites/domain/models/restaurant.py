"""Restaurant domain model: maps to the 'restaurants' table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from qrbites.infrastructure.database import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Embedded value objects, shaped like the API payload
    contact = Column(JSON, nullable=False)  # {"phone", "email", "website"}
    location = Column(JSON, nullable=False)  # {"street", "houseNumber", "city", "zipCode"}
    hours = Column(JSON, nullable=False, default=list)  # 7 x {"day", "closed", "open", "close"}

    logo_url = Column(String(1000), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="restaurants")
    menus = relationship(
        "Menu", back_populates="restaurant", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Restaurant {self.id} - {self.name}>"
