# blogsite/models/category.py

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from blogsite.db.base_class import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text)

    posts = relationship("Post", back_populates="category")
