"""
Top-Up Storefront - Main FastAPI Application
Game top-ups and digital goods, ordered over WhatsApp
"""

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import os
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Import API routers
from storefront.api import auth, categories, products, packages, orders, promo, settings, public, upload
from storefront.services.bootstrap import seed_initial_data
from storefront.utils.database import engine, create_tables, get_db, get_async_session
from storefront.utils.email_brevo import BrevoEmailService

APP_VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    await create_tables()
    async with get_async_session() as db:
        await seed_initial_data(db)

    app.state.email_service = BrevoEmailService()
    await app.state.email_service.start()
    logger.info("Storefront API started")
    yield
    # Shutdown
    await app.state.email_service.close()
    await engine.dispose()

# Initialize FastAPI app
app = FastAPI(
    title="Top-Up Storefront",
    description="Game top-up and digital goods storefront with WhatsApp checkout",
    version=APP_VERSION,
    docs_url="/api/docs" if os.getenv("DEBUG", "false").lower() == "true" else None,
    lifespan=lifespan
)

# Middleware
allowed_origins = [
    "http://localhost:5173",
    "http://localhost:3000",
]
if os.getenv("CLIENT_URL"):
    allowed_origins.append(os.getenv("CLIENT_URL"))

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error responses are always {"error": "<message>"}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": message})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

# Uploaded images and payment proofs
os.makedirs(upload.UPLOAD_DIR, exist_ok=True)
app.mount(upload.UPLOAD_URL_PREFIX, StaticFiles(directory=upload.UPLOAD_DIR), name="uploads")

# API Routes
app.include_router(auth.router, prefix="/api/auth")
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(packages.router, prefix="/api/packages", tags=["packages"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(promo.router, prefix="/api/promo", tags=["promo"])
app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
app.include_router(public.router, prefix="/api/public", tags=["public"])
app.include_router(upload.router, prefix="/api/upload", tags=["upload"])

# Root routes
@app.get("/")
async def root():
    return {"name": "Top-Up Storefront API", "version": APP_VERSION}

@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint with a database probe"""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unreachable"})
    return {"status": "healthy", "database": "connected", "version": APP_VERSION}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "false").lower() == "true"
    )
