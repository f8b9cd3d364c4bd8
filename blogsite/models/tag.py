# blogsite/models/tag.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from blogsite.db.base_class import Base


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)

    post_links = relationship("PostTag", back_populates="tag")
