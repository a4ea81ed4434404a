"""Database models for graphiform tests (shared)."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, select
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, object_session, relationship

from graphiform import SelectCollection


class Base(DeclarativeBase):
    pass


class PostStatus(enum.Enum):
    draft = 'draft'
    published = 'published'


class User(Base):
    """Application users"""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, comment='Public display name')
    email = Column(String(200), nullable=False)

    posts = relationship('Post', back_populates='author', order_by='Post.id')

    def post_collection(self):
        """Posts of this user as a filterable collection."""
        stmt = select(Post).where(Post.author_id == self.id).order_by(Post.id)
        return SelectCollection(Post, stmt, object_session(self))


class Post(Base):
    __tablename__ = 'posts'
    __table_args__ = {'comment': 'Blog posts'}

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    content = Column(Text)
    status = Column(SAEnum(PostStatus), nullable=False, default=PostStatus.draft)
    author_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    author = relationship('User', back_populates='posts')
    comments = relationship('Comment', back_populates='post', order_by='Comment.id')


class Comment(Base):
    __tablename__ = 'comments'

    id = Column(Integer, primary_key=True)
    body = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey('posts.id'), nullable=False)

    post = relationship('Post', back_populates='comments')
