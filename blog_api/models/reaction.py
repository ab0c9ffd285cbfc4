from sqlalchemy import Column, Integer, String, SmallInteger, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from blog_api.models.base import Base
from enum import IntEnum
from blog_api.core.time import now_utc8


# 反应类型
class ReactionKind(IntEnum):
    LIKE = 0     # 点赞
    DISLIKE = 1  # 踩


class PostReaction(Base):
    """ 帖子反应表（点赞 / 踩），一行代表一个用户对一个帖子的一种反应。

        CREATE TABLE IF NOT EXISTS post_reactions (
            _id INT AUTO_INCREMENT PRIMARY KEY,               -- 系统主键（自增）
            post_id VARCHAR(36) NOT NULL,                     -- 帖子业务主键 (FK -> posts.pid)
            user_id VARCHAR(36) NOT NULL,                     -- 用户 ID
            kind SMALLINT NOT NULL,                           -- 反应类型（0: 点赞, 1: 踩）
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,   -- 反应时间

            CONSTRAINT uq_reactions_post_user_kind UNIQUE (post_id, user_id, kind),
            FOREIGN KEY (post_id) REFERENCES posts(pid) ON DELETE CASCADE
        );
        CREATE INDEX idx_reactions_post_kind ON post_reactions (post_id, kind);
    """

    __tablename__ = "post_reactions"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String(36), ForeignKey("posts.pid", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), nullable=False)
    kind = Column(SmallInteger, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    __table_args__ = (
        # 同一用户对同一帖子的同一种反应只能有一条（并发重复插入由数据库拒绝）
        UniqueConstraint("post_id", "user_id", "kind", name="uq_reactions_post_user_kind"),
        Index("idx_reactions_post_kind", "post_id", "kind"),
    )
