"""
# `stickerverse/main.py` - Application entry point

## Overview
Creates the FastAPI app, applies CORS from `settings.allowed_origins` (list or `*`), sets the
log level and mounts the routers.

**Public routers:**
- `/auth`
- `/stickers`
- `/users`
- `/cart`
- `/custom-stickers`

**Admin routers (prefix `/admin`):**
- `/stickers` (create / update / delete, each a gated mutation)
- `/users` (list, role change)
- `/orders`
- `/dashboard`

Store failures that escape a handler are returned as
`{"detail": {"reason": "store-failure", "code": ..., "message": ...}}` with `404` for
`not-found`, `403` for `permission-denied` and `502` otherwise.

Firebase is initialised on first use, not at import time.

Run locally from `backend/`:
`uvicorn stickerverse.main:app --reload`
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stickerverse.config import settings
from stickerverse.core.store import StoreError
from stickerverse.routers import admin_dashboard, auth, carts, custom_stickers, orders, stickers, users

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("stickerverse.store")

# Initialize FastAPI app
app = FastAPI(
    title="StickerVerse API",
    description="Backend API for the StickerVerse sticker storefront and its admin panel.",
    version="1.0.0",
    debug=settings.debug,
)

# Configure CORS (allow front-end domain or all origins as specified)
allow_origins = [origin.strip() for origin in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if exc.code == "not-found":
        code = 404
    elif exc.code == "permission-denied":
        code = 403
    else:
        code = 502
        logger.error("Unhandled store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=code,
        content={"detail": {"reason": "store-failure", "code": exc.code, "message": str(exc)}},
    )


# Include public routers
app.include_router(auth.router)
app.include_router(stickers.router)
app.include_router(users.router)
app.include_router(carts.router)
app.include_router(custom_stickers.router)

# Include admin routers (with prefix /admin)
app.include_router(stickers.admin_router, prefix="/admin")
app.include_router(users.admin_router, prefix="/admin")
app.include_router(orders.admin_router, prefix="/admin")
app.include_router(admin_dashboard.router, prefix="/admin")


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("stickerverse.main:app", host="0.0.0.0", port=8000, reload=True)
