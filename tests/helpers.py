"""Shared fixtures: in-memory SQLite database and account factories for tests."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pictura.core.security import hash_password
from pictura.models import Base, Post, User
from pictura.models.user import ROLE_ADMIN, ROLE_USER

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
DEFAULT_PASSWORD = "secret1"


def make_engine() -> Engine:
    """Fresh in-memory database with all tables; StaticPool shares it across threads."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


def make_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def create_user(
    db: Session,
    email: str = "user@example.com",
    name: str = "Test User",
    password: str = DEFAULT_PASSWORD,
    role: str = ROLE_USER,
    **kwargs: object,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_admin(db: Session, email: str = "admin@example.com", **kwargs: object) -> User:
    return create_user(db, email=email, name="Admin", role=ROLE_ADMIN, **kwargs)


def create_post(db: Session, owner: User, content: str = "hello", **kwargs: object) -> Post:
    post = Post(
        user_id=owner.id,
        content=content,
        image="post-1-1.png",
        image_url="/uploads/images/post-1-1.png",
        **kwargs,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post
