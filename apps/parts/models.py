from core.database import Base
from sqlalchemy import BigInteger, Column, DateTime, Integer, Numeric, String, Text, func


class Part(Base):
    __tablename__ = "parts"

    # SQLite only autoincrements a plain INTEGER primary key
    part_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0, server_default="0")
    price = Column(Numeric(10, 2), nullable=True)
    category = Column(String(100), index=True, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
