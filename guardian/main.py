"""
Guardian Autopilot - FastAPI Backend
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from guardian import __version__
from guardian.config import get_settings
from guardian.routes import automation, config, gateway, health, metrics, tickets
from guardian.middleware.logging_middleware import LoggingMiddleware

settings = get_settings()

app = FastAPI(
    title="Guardian Autopilot",
    description="Support ticket triage with rule-based reply drafting and automation",
    version=__version__
)

# Middleware runs bottom-up: CORS first, then request logging
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)

# Routers (prefixes are defined in each router module)
app.include_router(gateway.router)
app.include_router(tickets.router)
app.include_router(automation.router)
app.include_router(config.router)
app.include_router(metrics.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Guardian Autopilot API", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)
