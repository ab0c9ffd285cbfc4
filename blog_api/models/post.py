from sqlalchemy import Column, Integer, String, TIMESTAMP, Text, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from blog_api.models.base import Base
from blog_api.models.reaction import ReactionKind
import uuid
from blog_api.core.time import now_utc8


class Post(Base):
    """ 博客帖子表，存储标题、正文、分类、封面等信息。
        点赞 / 踩 存在 post_reactions 表中，likes / dislikes 由关系派生。

        CREATE TABLE IF NOT EXISTS posts (
            _id INT AUTO_INCREMENT PRIMARY KEY,           -- 系统主键ID（自增，也是存储顺序）
            pid VARCHAR(36) UNIQUE,                       -- 业务主键PID（UUID）
            author_id VARCHAR(36) NOT NULL,               -- 作者 ID（来自令牌）
            title VARCHAR(255) NOT NULL,                  -- 标题
            slug VARCHAR(255) NOT NULL,                   -- 由标题生成的 URL 标识（不保证唯一）
            content TEXT NOT NULL,                        -- 正文（可包含 HTML）
            category VARCHAR(100) DEFAULT 'uncategorized',-- 分类
            image VARCHAR(512),                           -- 封面图 URL
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
        );

        CREATE INDEX idx_posts_author_id ON posts (author_id);
        CREATE INDEX idx_posts_slug ON posts (slug);
        CREATE INDEX idx_posts_category ON posts (category);
        CREATE INDEX idx_posts_updated_at ON posts (updated_at);
        CREATE INDEX idx_posts_created_at ON posts (created_at);
    """

    __tablename__ = "posts"

    # 系统主键：自增
    _id = Column(Integer, primary_key=True, autoincrement=True)  # 系统主键ID，不对外暴露
    # 业务主键：UUID
    pid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    author_id = Column(String(36), nullable=False)     # 作者 ID
    title = Column(String(255), nullable=False)        # 标题
    slug = Column(String(255), nullable=False)         # URL 标识
    content = Column(Text, nullable=False)             # 正文
    category = Column(String(100), nullable=False)     # 分类
    image = Column(String(512), nullable=False)        # 封面图
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)                    # 创建时间
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc8, onupdate=now_utc8)  # 更新时间

    # 单向引用：该帖子的所有反应（点赞 + 踩），删除帖子时一并删除
    reactions = relationship("PostReaction", cascade="all", lazy="selectin")

    __table_args__ = (
        UniqueConstraint('pid', name='unique_pid'),
        Index("idx_posts_author_id", "author_id"),
        Index("idx_posts_slug", "slug"),
        Index("idx_posts_category", "category"),
        Index("idx_posts_updated_at", "updated_at"),
        Index("idx_posts_created_at", "created_at"),
    )

    # 点赞用户集合
    @property
    def likes(self) -> list[str]:
        return [r.user_id for r in self.reactions if r.kind == ReactionKind.LIKE.value]

    # 踩的用户集合
    @property
    def dislikes(self) -> list[str]:
        return [r.user_id for r in self.reactions if r.kind == ReactionKind.DISLIKE.value]
