# blogsite/models/user.py
from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship
from blogsite.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255))
    avatar = Column(String(1024))
    bio = Column(Text)
    is_admin = Column(Boolean, nullable=False, default=False)

    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="author")
