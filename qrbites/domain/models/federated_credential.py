"""Federated credential: links an external OAuth identity to a User."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from qrbites.infrastructure.database import Base


class FederatedCredential(Base):
    __tablename__ = "federated_credentials"
    __table_args__ = (UniqueConstraint("provider", "provider_id", name="uq_provider_identity"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(String(20), nullable=False)
    provider_id = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    profile_picture = Column(String(1000), nullable=True)
    access_token = Column(Text, nullable=True)  # Fernet-encrypted
    refresh_token = Column(Text, nullable=True)  # Fernet-encrypted
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="credentials")

    def __repr__(self):
        return f"<FederatedCredential {self.provider}:{self.provider_id}>"
