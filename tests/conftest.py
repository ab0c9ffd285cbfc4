import os

# 测试使用内存 SQLite，必须在导入 blog_api 之前设置
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-bytes-for-hs256")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api.core.security import CurrentUser, create_access_token
from blog_api.models.base import Base
from blog_api.models.post import Post
from blog_api.schemas.post import PostCreate
from blog_api.service import post_svc
from blog_api.storage.database import get_db
from blog_api.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from blog_api.storage.reaction.SQLAlchemyReactionRepository import SQLAlchemyReactionRepository
from main import app

ADMIN = CurrentUser(uid="admin-1", is_admin=True)
OTHER_ADMIN = CurrentUser(uid="admin-2", is_admin=True)
READER = CurrentUser(uid="reader-1", is_admin=False)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def post_repo(db_session):
    return SQLAlchemyPostRepository(db_session)


@pytest.fixture
def reaction_repo(db_session):
    return SQLAlchemyReactionRepository(db_session)


@pytest.fixture
def make_post(post_repo):
    """以 ADMIN 身份创建帖子，返回 PostOut"""
    def _make(title="Hello World!", content="some content", author=ADMIN, **fields):
        return post_svc.create_post(
            post_repo=post_repo,
            current_user=author,
            data=PostCreate(title=title, content=content, **fields),
            to_dict=False,
        )
    return _make


@pytest.fixture
def set_times(db_session):
    """直接改写帖子的 created_at / updated_at，便于测试排序和时间窗口"""
    def _set(pid: str, created_at: datetime | None = None, updated_at: datetime | None = None):
        post = db_session.query(Post).filter(Post.pid == pid).one()
        if created_at is not None:
            post.created_at = created_at
        if updated_at is not None:
            post.updated_at = updated_at
        db_session.commit()
    return _set


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # 不进入 with 块，lifespan 不会在默认引擎上建表
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: CurrentUser) -> dict:
    token = create_access_token(user.uid, is_admin=user.is_admin)
    return {"Authorization": f"Bearer {token}"}
