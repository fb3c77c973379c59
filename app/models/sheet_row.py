from sqlalchemy import Column, Integer, String, JSON, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db.session import Base

class SheetRow(Base):
    __tablename__ = "sheet_rows"
    __table_args__ = (UniqueConstraint("sheet", "position", name="uq_sheet_rows_sheet_position"),)

    id = Column(Integer, primary_key=True, index=True)
    sheet = Column(String(64), nullable=False, index=True)
    # 0-based data row index, header excluded
    position = Column(Integer, nullable=False)
    cells = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
