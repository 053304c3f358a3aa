import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from app import config
from app.routers import client_keys, storage
from app.services.client_keys import ClientKeyStore
from app.storage import LocalStorage, StorageError

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Typed storage failures -> 4xx/5xx. Faults carry a generic message only."""
    if exc.status_code >= 500:
        logger.error("Storage fault on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(
    storage_root: Path = config.STORAGE_ROOT,
    static_prefix: str = config.STATIC_PREFIX,
    client_keys_file: Path = config.CLIENT_KEYS_FILE,
    client_header_key: str = config.CLIENT_HEADER_KEY,
    max_upload_size: int = config.MAX_UPLOAD_SIZE,
    admin_token: Optional[str] = config.ADMIN_TOKEN,
) -> FastAPI:
    app = FastAPI(
        title="Client File Store",
        description="Multi-tenant file storage keyed by client keys",
        version="0.1.0",
    )

    key_store = ClientKeyStore(client_keys_file)
    local_storage = LocalStorage(
        root=storage_root,
        static_prefix=static_prefix,
        key_gate=key_store,
    )
    app.state.key_store = key_store
    app.state.storage = local_storage
    app.state.client_header_key = client_header_key.lower()
    app.state.max_upload_size = max_upload_size
    app.state.admin_token = admin_token

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StorageError, storage_error_handler)

    # Include routers
    app.include_router(storage.router)
    app.include_router(client_keys.router)

    @app.get("/")
    async def root():
        return {"message": "Client File Store", "version": "0.1.0"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Public static files: /<static_prefix>/<client>/[<owner>/]<stored name>
    public_root = local_storage.root

    @app.get(f"/{static_prefix}/{{path:path}}")
    async def serve_public(path: str):
        """Serve stored files without a client key. Path must stay under the storage root."""
        full_path = (public_root / path.lstrip("/")).resolve()
        if not full_path.is_relative_to(public_root):
            return PlainTextResponse("Forbidden", status_code=403)
        if not full_path.is_file() or full_path.name.startswith("."):
            return PlainTextResponse("Not Found", status_code=404)
        return FileResponse(full_path)

    logger.info("Serving storage root %s at /%s", public_root, static_prefix)
    return app


app = create_app()
