# models/transaction.py
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Index, Integer, Numeric, Text, func, false
from gcash_portal.database import Base
from gcash_portal.models.constant import DEFAULT_TRANSACTION_STATUS, PUBLIC_SCHEMA

class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_user_email", "user_email"),
        Index("idx_transactions_date", "date"),
        Index("idx_transactions_type", "type"),
        {"schema": PUBLIC_SCHEMA},
    )

    # bigserial on Postgres, plain rowid alias on SQLite
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    # Ownership is matched against the caller's JWT email claim, not a foreign key
    user_email = Column(Text, nullable=False)

    customer_name = Column(Text, nullable=False)
    phone_number = Column(Text)

    # Money fields; total = amount (+ charge when include_charge) is kept by the caller
    amount = Column(Numeric(10, 2), nullable=False)
    charge = Column(Numeric(10, 2), server_default="0")
    include_charge = Column(Boolean, server_default=false())
    total = Column(Numeric(10, 2), nullable=False)

    type = Column(Text, nullable=False)  # Cash In, Cash Out, Bills Payment, ...
    date = Column(DateTime(timezone=True), server_default=func.now())
    status = Column(Text, server_default=DEFAULT_TRANSACTION_STATUS)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
