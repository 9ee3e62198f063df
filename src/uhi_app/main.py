"""UHI Explorer - Urban Heat Island map explorer.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from loguru import logger

from uhi_app.config import Settings, settings
from uhi_app.routers import explorer_router
from uhi_engine import MapExplorer
from uhi_engine.clusters import DEFAULT_METRICS, default_registry, load_registry
from uhi_engine.surfaces import create_surface


# ---------------------------------------------------------------------------
# Subsystem startup helpers
# ---------------------------------------------------------------------------

def build_explorer(cfg: Settings) -> MapExplorer:
    """Create a MapExplorer from settings (not yet mounted)."""
    if cfg.clusters_path is not None:
        registry = load_registry(cfg.clusters_path, DEFAULT_METRICS)
    else:
        registry = default_registry()

    if cfg.map_surface == "placeholder":
        surface = create_surface("placeholder")
    else:
        surface = create_surface(cfg.map_surface, style=cfg.map_style)

    explorer = MapExplorer(
        registry,
        surface,
        config=cfg.surface_config(),
        zones=cfg.zone_scheme(),
    )
    logger.info(
        f"Explorer: {len(registry)} clusters, surface={cfg.map_surface}, "
        f"layers={','.join(explorer.layers.state.names)}"
    )
    return explorer


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} v0.1.0 - INITIALIZING")
    logger.info("=" * 60)

    explorer = build_explorer(settings)
    app.state.explorer = explorer
    app.state.notifications = explorer.subscribe_notifications()

    explorer.mount(settings.map_container)
    if settings.map_token:
        explorer.configure(settings.map_token)
    else:
        logger.info("Map token not set: serving placeholder (POST /api/explorer/surface/token to enable)")

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} ONLINE")
    logger.info("=" * 60)

    yield

    explorer.event_bus.unsubscribe(app.state.notifications)
    app.state.notifications = None
    explorer.destroy()
    app.state.explorer = None
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title="UHI Explorer",
    description="Urban Heat Island map explorer",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(explorer_router)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the current map view."""
    explorer = getattr(app.state, "explorer", None)
    if explorer is None:
        return HTMLResponse(
            content="""
            <html>
                <head><title>UHI Explorer</title></head>
                <body style="background: #242f3e; color: #e5e7eb; font-family: sans-serif;">
                    <h1>UHI Explorer v0.1.0</h1>
                    <p>Explorer not started.</p>
                </body>
            </html>
            """
        )
    return HTMLResponse(content=explorer.render_map())


@app.get("/health")
async def health():
    explorer = getattr(app.state, "explorer", None)
    return {
        "status": "ok",
        "surface": explorer.surface.state.value if explorer else None,
    }


def main() -> None:
    import uvicorn

    uvicorn.run("uhi_app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()
