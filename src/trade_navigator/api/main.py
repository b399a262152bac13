from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from trade_navigator import __version__
from trade_navigator.config.logging_setup import configure_logging
from trade_navigator.config.settings import get_settings, Settings
from trade_navigator.api.cost_api import router as cost_router
from trade_navigator.api.dependencies import get_app_settings
from trade_navigator.api.errors import register_error_handlers
from trade_navigator.api.optimizer_api import router as optimizer_router

configure_logging()

app = FastAPI(
    title="Trade Navigator API",
    description="Landed cost and pricing optimization calculators",
    version=__version__,
)

# Enable CORS for the dashboard frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().allowed_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(cost_router)
app.include_router(optimizer_router)


@app.get("/")
async def root(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "online",
        "message": "Trade Navigator API Active",
        "version": __version__,
        "default_target_margin": settings.default_target_margin,
        "max_price_points": settings.max_price_points,
    }
