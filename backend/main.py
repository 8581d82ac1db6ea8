# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from services.errors import CommerceError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Routers
from routes.users import router as users_router
from routes.products import router as products_router
from routes.reviews import router as reviews_router
from routes.cart import router as cart_router
from routes.wishlist import router as wishlist_router
from routes.orders import router as orders_router
from routes.stats import router as stats_router
from routes.stock import router as stock_router
from routes.logs import router as logs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready at %s", settings.DATABASE_URL.split("@")[-1])
    yield


app = FastAPI(title="GreenLedger Storefront API", version="1.0.0", lifespan=lifespan)

# CORS: local dev server plus the deployed frontend, if configured
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CommerceError)
async def commerce_error_handler(request: Request, exc: CommerceError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": type(exc).__name__},
    )


# Router registration
app.include_router(users_router)
app.include_router(products_router)
app.include_router(reviews_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(orders_router)
app.include_router(stats_router)
app.include_router(stock_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "GreenLedger Storefront API is running"}
