from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from blog_api.core.config import settings
from blog_api.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from blog_api.storage.reaction.SQLAlchemyReactionRepository import SQLAlchemyReactionRepository

from fastapi import Depends

# SQLAlchemy 引擎（DATABASE_URL 见 blog_api/core/config.py）
engine = create_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# 未来可以根据配置切换不同的实现
def get_post_repo(db: Session = Depends(get_db)) -> SQLAlchemyPostRepository:
    return SQLAlchemyPostRepository(db)
def get_reaction_repo(db: Session = Depends(get_db)) -> SQLAlchemyReactionRepository:
    return SQLAlchemyReactionRepository(db)
