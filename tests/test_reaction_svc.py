from datetime import timedelta
from itertools import product

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api.core.config import settings
from blog_api.core.exceptions import PostNotFound
from blog_api.core.time import now_utc8
from blog_api.models.base import Base
from blog_api.models.reaction import ReactionKind
from blog_api.service import reaction_svc
from blog_api.storage.reaction.SQLAlchemyReactionRepository import SQLAlchemyReactionRepository


def _sets(post_repo, pid):
    post = post_repo.get_post_by_pid(pid)
    return set(post.likes), set(post.dislikes)


def test_like_then_dislike_moves_user(make_post, post_repo, reaction_repo):
    post = make_post()

    liked = reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1")
    assert liked == {"message": "Post liked", "action": "liked", "likesCount": 1}

    disliked = reaction_svc.toggle_dislike(post_repo, reaction_repo, post.pid, "u1")
    assert disliked == {
        "message": "Post disliked",
        "action": "disliked",
        "dislikesCount": 1,
        "likesCount": 0,
    }
    assert _sets(post_repo, post.pid) == (set(), {"u1"})


def test_like_twice_restores_state(make_post, post_repo, reaction_repo):
    post = make_post()
    reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "other")
    before = _sets(post_repo, post.pid)

    reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1")
    unliked = reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1", to_dict=False)

    assert unliked.action.value == "unliked"
    assert unliked.likes_count == 1
    assert _sets(post_repo, post.pid) == before


def test_dislike_twice_restores_state(make_post, post_repo, reaction_repo):
    post = make_post()

    reaction_svc.toggle_dislike(post_repo, reaction_repo, post.pid, "u1")
    undisliked = reaction_svc.toggle_dislike(post_repo, reaction_repo, post.pid, "u1")

    assert undisliked == {"message": "Post undisliked", "action": "undisliked", "dislikesCount": 0}
    assert _sets(post_repo, post.pid) == (set(), set())


def test_like_clears_existing_dislike_by_default(make_post, post_repo, reaction_repo):
    post = make_post()
    reaction_svc.toggle_dislike(post_repo, reaction_repo, post.pid, "u1")

    reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1")

    assert _sets(post_repo, post.pid) == ({"u1"}, set())


def test_legacy_like_keeps_existing_dislike(make_post, post_repo, reaction_repo, monkeypatch):
    monkeypatch.setattr(settings, "like_clears_dislike", False)
    post = make_post()
    reaction_svc.toggle_dislike(post_repo, reaction_repo, post.pid, "u1")

    reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1")

    assert _sets(post_repo, post.pid) == ({"u1"}, {"u1"})


@pytest.mark.parametrize("sequence", list(product(["like", "dislike"], repeat=4)))
def test_likes_and_dislikes_stay_disjoint(make_post, post_repo, reaction_repo, sequence):
    post = make_post()
    toggles = {"like": reaction_svc.toggle_like, "dislike": reaction_svc.toggle_dislike}

    for i, op in enumerate(sequence):
        # 两个用户交替操作
        toggles[op](post_repo, reaction_repo, post.pid, f"u{i % 2}")
        likes, dislikes = _sets(post_repo, post.pid)
        assert not likes & dislikes


def test_toggle_on_missing_post(post_repo, reaction_repo):
    with pytest.raises(PostNotFound):
        reaction_svc.toggle_like(post_repo, reaction_repo, "missing", "u1")
    with pytest.raises(PostNotFound):
        reaction_svc.toggle_dislike(post_repo, reaction_repo, "missing", "u1")


def test_toggle_bumps_updated_at(make_post, post_repo, reaction_repo, set_times):
    post = make_post()
    set_times(post.pid, updated_at=now_utc8() - timedelta(days=2))
    stale = post_repo.get_post_by_pid(post.pid).updated_at

    reaction_svc.toggle_like(post_repo, reaction_repo, post.pid, "u1")

    assert post_repo.get_post_by_pid(post.pid).updated_at > stale


def test_concurrent_duplicate_insert_counts_as_present(make_post, post_repo, reaction_repo, monkeypatch):
    """另一个请求抢先插入了同一条点赞：唯一约束拒绝本次插入，结果仍是“已点赞”"""
    post = make_post()
    reaction_repo.toggle(post.pid, "u1", ReactionKind.LIKE)

    class _MissedDelete:
        def delete(self, synchronize_session=False):
            return 0

    # 模拟本请求的条件删除发生在对方插入之前
    monkeypatch.setattr(reaction_repo, "_membership", lambda *args, **kwargs: _MissedDelete())

    assert reaction_repo.toggle(post.pid, "u1", ReactionKind.LIKE) is True
    monkeypatch.undo()
    assert reaction_repo.count(post.pid, ReactionKind.LIKE) == 1
    assert reaction_repo.has_reaction(post.pid, "u1", ReactionKind.LIKE)


@pytest.fixture
def fk_reaction_repo():
    """开启外键约束的 SQLite，用于模拟帖子在校验之后被删除"""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield SQLAlchemyReactionRepository(db)
    db.close()
    engine.dispose()


def test_toggle_on_deleted_post_raises_not_found(fk_reaction_repo):
    with pytest.raises(PostNotFound):
        fk_reaction_repo.toggle("deleted-post", "u1", ReactionKind.LIKE)
    assert fk_reaction_repo.count("deleted-post", ReactionKind.LIKE) == 0
    assert not fk_reaction_repo.has_reaction("deleted-post", "u1", ReactionKind.LIKE)
