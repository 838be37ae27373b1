from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecoflight.services.api.core.config import settings
from ecoflight.services.api.core.fourfly import close_fourfly
from ecoflight.services.api.core.logs import configure_logging, log_startup_config, logger
from ecoflight.services.api.db.session import init_db
from ecoflight.services.api.routers import auth, carbon, offsets

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    log_startup_config(settings)
    init_db()
    logger.info("%s ready on port %s", settings.APP_NAME, settings.PORT)

@app.on_event("shutdown")
async def on_shutdown():
    await close_fourfly()

@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME, "env": settings.ENV}

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(carbon.router, prefix="/api", tags=["Carbon"])
app.include_router(offsets.router, prefix="/api/offsets", tags=["Offsets"])


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

if __name__ == "__main__":
    run()
