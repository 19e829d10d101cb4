"""AppSetting model - key/value panel settings stored locally."""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from invoice_panel.database import Base


class AppSetting(Base):
    """Single panel setting (default tax rate, invoice prefix, footer text)."""

    __tablename__ = 'app_setting'

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(64), nullable=False, unique=True)
    value = Column(Text, nullable=False, default='')
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AppSetting(key='{self.key}', value='{self.value}')>"
