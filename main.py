from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.core.biz_response import BizResponse
from blog_api.core.config import settings
from blog_api.core.logx import logger
from blog_api.models.base import Base
from blog_api.routers import posts
from blog_api.storage.database import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 启动时建表（已存在则跳过）
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.project_name} started")
    yield


app = FastAPI(title=settings.project_name, lifespan=lifespan)

# 注册路由
app.include_router(posts.posts_router)


# 鉴权失败等 HTTPException 也使用统一响应格式
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return BizResponse(data=None, msg=str(exc.detail), status_code=exc.status_code, headers=exc.headers)

# uvicorn main:app
# uvicorn main:app --reload
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.project_name}"}
