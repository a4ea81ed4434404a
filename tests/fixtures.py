"""Database fixtures for graphiform tests (shared)."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from .models import Comment, Post, PostStatus, User


def seed_populated_db(session: Session):
    """Create and commit the sample users, posts and comments used across tests."""
    alice = User(name="Alice Johnson", email="alice@example.com")
    bob = User(name="Bob Smith", email="bob@example.com")
    session.add_all([alice, bob])
    session.flush()
    now = datetime(2024, 1, 1, 12, 0, 0)
    posts = [
        Post(title="First Post", content="Hello world!", status=PostStatus.published,
             author_id=alice.id, created_at=now - timedelta(minutes=60)),
        Post(title="Draft Notes", content="Not yet", status=PostStatus.draft,
             author_id=alice.id, created_at=now - timedelta(minutes=30)),
        Post(title="GraphQL Tips", content="Use filters", status=PostStatus.published,
             author_id=bob.id, created_at=now - timedelta(minutes=10)),
    ]
    session.add_all(posts)
    session.flush()
    comments = [
        Comment(body="Nice!", post_id=posts[0].id),
        Comment(body="Thanks", post_id=posts[0].id),
        Comment(body="Helpful", post_id=posts[2].id),
    ]
    session.add_all(comments)
    session.commit()
    return {'users': [alice, bob], 'posts': posts, 'comments': comments}


@pytest.fixture(scope="function")
def populated_db(db_session: Session):
    return seed_populated_db(db_session)
