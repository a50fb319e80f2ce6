from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.config import settings
from app.core.firebase_init import initialize_firebase, get_firebase_status

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AirTech Complaints API",
    description="Maintenance complaint tracking with role based permissions",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    """Initialize Firebase unless running on the in-memory database"""
    logger.info("🚀 FastAPI startup event triggered")
    if settings.DATABASE_BACKEND == "memory":
        logger.info("DATABASE_BACKEND=memory, skipping Firestore initialization")
        return
    if not get_firebase_status()['available'] and not initialize_firebase():
        logger.warning("⚠️ Firebase initialization failed - app will run without Firebase features")

def safe_include_router(router_module_path: str, router_name: str = "router"):
    """Safely include a router with error handling"""
    try:
        module = __import__(router_module_path, fromlist=[router_name])
        router = getattr(module, router_name)
        app.include_router(router)
        logger.info(f"✅ Successfully included {router_module_path}")
        return True
    except Exception as e:
        logger.exception(f"❌ Failed to include {router_module_path}: {str(e)}")
        return False

logger.info("Loading routers...")

routers_to_load = [
    ("app.routers.complaints", "Complaints"),
    ("app.routers.users", "Users"),
]

successful_routers = []
failed_routers = []

for router_path, router_description in routers_to_load:
    if safe_include_router(router_path):
        successful_routers.append(router_description)
    else:
        failed_routers.append(router_description)

logger.info(f"Successfully loaded routers: {successful_routers}")
if failed_routers:
    logger.warning(f"Failed to load routers: {failed_routers}")

@app.get("/")
async def root():
    return {
        "message": "Welcome to the AirTech Complaints API",
        "database_backend": settings.DATABASE_BACKEND,
        "firebase_status": get_firebase_status(),
        "loaded_routers": successful_routers,
        "failed_routers": failed_routers
    }

@app.get("/health")
async def health_check():
    firebase_status = get_firebase_status()
    return {
        "status": "healthy",
        "database_backend": settings.DATABASE_BACKEND,
        "firebase_available": firebase_status['available'],
        "loaded_routers": len(successful_routers),
        "failed_routers": len(failed_routers)
    }
