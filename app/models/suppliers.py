# app/models/suppliers.py

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.database import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), unique=True, nullable=False)
    contact = Column(String(100), nullable=True)

    # NULL when absent, so several suppliers may omit them
    phone = Column(String(20), unique=True, nullable=True)
    email = Column(String(100), unique=True, nullable=True)

    address = Column(String(200), nullable=True)

    active = Column(Boolean, default=True, nullable=False)

    registered_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
