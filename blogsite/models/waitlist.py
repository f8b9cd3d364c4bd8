# blogsite/models/waitlist.py
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func
from blogsite.db.base_class import Base


class WaitlistEntry(Base):
    __tablename__ = "waitlist"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    blog_type = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
