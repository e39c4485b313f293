import os
import sys
import importlib
from pathlib import Path
from fastapi import FastAPI, APIRouter, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from alembic.config import Config
from alembic import command
from core.database import engine, settings
from core.exceptions import APIError
from apps.parts.schemas import NAME_ERROR


import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

# The directory where all application folders are located
APPS_DIRECTORY = "apps"
API_PREFIX = "/api"


# --- Database Migration Function ---
def run_migrations():
    """Programmatically runs Alembic migrations."""
    print("⏳ Running database migrations...")
    try:
        # Load Alembic configuration from the alembic.ini file next to this module
        alembic_cfg = Config(str(BASE_DIR / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(BASE_DIR / "alembic"))
        # Run the 'upgrade head' command to apply all pending migrations
        command.upgrade(alembic_cfg, "head")
        print("✅ Migrations complete.")
    except Exception as e:
        print(f"❌ An error occurred during migrations: {e}")
        raise e


def check_database_connection(db_engine=engine):
    """Borrow one pooled connection; without a database there is nothing to serve."""
    try:
        with db_engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        print(f"❌ Database connection test failed: {e}")
        print("❌ Server cannot start without a database connection.")
        print("❌ Please check .env settings and database status.")
        sys.exit(1)
    print("✅ Database connection test successful!")


# Initialize the main FastAPI application
app = FastAPI(
    title="Parts Inventory API",
    description="CRUD API over the parts inventory table.",
    version="1.0.0",
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Handlers: every failure is a {"message": ...} body ---
@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "Invalid request body."
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "value_error":
        message = str(first.get("ctx", {}).get("error", message))
    elif first.get("type") == "missing" and tuple(first.get("loc", ())) == ("body",):
        # No body at all reads as an empty object, whose only failing rule is the name
        message = NAME_ERROR
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error [{request.method} {request.url.path}]")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error."},
    )


# --- Dynamic App Discovery and Router Inclusion ---
apps_path = os.path.join(os.path.dirname(__file__), APPS_DIRECTORY)

print("Searching for apps in:", apps_path)

if not os.path.isdir(apps_path):
    print(f"Error: The directory '{APPS_DIRECTORY}' was not found.")
else:
    for item_name in sorted(os.listdir(apps_path)):
        app_dir = os.path.join(apps_path, item_name)

        if os.path.isdir(app_dir) and not item_name.startswith(('_', '.')):
            module_name = f"{APPS_DIRECTORY}.{item_name}.router"
            try:
                # Import the models from each app to ensure Alembic can detect them
                importlib.import_module(f'{APPS_DIRECTORY}.{item_name}.models')

                router_module = importlib.import_module(module_name)
                router_instance = getattr(router_module, "router", None)

                if router_instance and isinstance(router_instance, APIRouter):
                    app.include_router(
                        router_instance,
                        prefix=f"{API_PREFIX}/{item_name}",
                        tags=[item_name.capitalize()]
                    )
                    print(f"✅ Successfully loaded router from '{item_name}'.")
                else:
                    print(f"⚠️ Could not find a valid APIRouter named 'router' in '{module_name}'.")

            except ImportError as e:
                print(f"❌ Failed to import router for '{item_name}': {e}")


# --- Catch-all for unmatched API routes ---
@app.api_route(
    f"{API_PREFIX}/{{path:path}}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def api_not_found(path: str):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": "API endpoint not found."},
    )


# --- Prebuilt frontend, mounted last so it never shadows the API ---
def mount_frontend(application: FastAPI, directory: str) -> bool:
    """Serve a prebuilt frontend from `directory` when it exists."""
    static_dir = Path(directory)
    if not static_dir.is_absolute():
        static_dir = BASE_DIR / static_dir
    if not static_dir.is_dir():
        return False
    application.mount("/", StaticFiles(directory=str(static_dir), html=True), name="frontend")
    print(f"✅ Serving frontend from '{static_dir}'.")
    return True


mount_frontend(app, settings.STATIC_DIR)


# --- Startup Event Handler ---
@app.on_event("startup")
def startup_event():
    """Verify the database and apply migrations before serving requests."""
    print("🚀 Starting Parts Inventory API...")
    check_database_connection()
    if settings.RUN_MIGRATIONS:
        run_migrations()
    print("Application is ready to serve requests.")


# --- Shutdown Event Handler ---
@app.on_event("shutdown")
def shutdown_event():
    """Release every pooled connection."""
    engine.dispose()
    print("✅ Database pool closed.")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
