# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from config import settings
from database import init_db
from services.errors import OrderingError

# Routers
from routes.menu import router as menu_router
from routes.sessions import router as sessions_router
from routes.cart import router as cart_router
from routes.splits import router as splits_router
from routes.orders import router as orders_router
from routes.payments import router as payments_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(title="Table Order API", version="1.0.0", lifespan=lifespan)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
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

# Domain errors become the same {"detail": ...} payload HTTPException produces
@app.exception_handler(OrderingError)
async def ordering_error_handler(request: Request, exc: OrderingError):
    logger.warning(
        exc.message,
        extra={"status": exc.status_code, "route": request.url.path, "error": type(exc).__name__},
    )
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

# Router registration
app.include_router(menu_router)
app.include_router(sessions_router)
app.include_router(cart_router)
app.include_router(splits_router)
app.include_router(orders_router)
app.include_router(payments_router)

@app.get("/")
def read_root():
    return {"message": "Table Order API is running"}
