from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.core.exceptions import StoreFailure
from blog_api.core.logx import logger


@contextmanager
def transaction(db: Session):
    """
    单次读-改-写的事务边界：
    - 正常退出时 commit
    - SQLAlchemyError 时 rollback，并包装为 StoreFailure（保留原始异常为 __cause__）
    - 其它异常 rollback 后原样抛出
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"transaction rolled back: {e.__class__.__name__}")
        raise StoreFailure(message=str(e)) from e
    except Exception:
        db.rollback()
        raise
