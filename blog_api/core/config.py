import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _default_database_url() -> str:
    # ======== 配置区（可用环境变量覆盖） ========
    host = os.getenv("DB_HOST", "127.0.0.1")
    port = os.getenv("DB_PORT", "3306")
    user = os.getenv("DB_USER", "root")
    password = os.getenv("DB_PASSWORD", "")
    name = os.getenv("DB_NAME", "blog_db")
    # ============================================
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


@dataclass
class Settings:
    """应用配置，全部在导入时从环境变量读取（.env 会先被加载）"""

    project_name: str = os.getenv("PROJECT_NAME", "Blog Post API")
    database_url: str = os.getenv("DATABASE_URL") or _default_database_url()
    db_echo: bool = _env_bool("DB_ECHO", "false")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # 令牌签名密钥与有效期
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # 帖子默认值
    default_category: str = os.getenv("DEFAULT_CATEGORY", "uncategorized")
    default_post_image: str = os.getenv(
        "DEFAULT_POST_IMAGE",
        "https://www.hostinger.com/tutorials/wp-content/uploads/sites/2/2021/09/how-to-write-a-blog-post.png",
    )

    # 列表分页
    posts_page_limit: int = int(os.getenv("POSTS_PAGE_LIMIT", "9"))
    recent_posts_limit: int = int(os.getenv("RECENT_POSTS_LIMIT", "3"))

    # 点赞时是否同时清除该用户的踩（true: 点赞与踩互斥；false: 旧版的不对称行为）
    like_clears_dislike: bool = _env_bool("LIKE_CLEARS_DISLIKE", "true")


settings = Settings()
