from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func, text

from account_service.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    password = Column(String(255), nullable=False, doc="bcrypt hash")
    token = Column(Text, nullable=True)
    token_expired_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "ix_users_phone_active",
            "phone",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("ix_users_token", "token"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, phone={self.phone})>"
