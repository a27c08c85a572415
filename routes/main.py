from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from core.settings import settings
from helpers.transport.bus_factory import create_bus
from .signals.signal_route import router as signal_router

app = FastAPI()

app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.ALLOWED_ORIGINS,  # Only pages served from the local app origin
  allow_credentials=True,
  allow_methods=["*"],  # Allow all HTTP methods
  allow_headers=["*"],  # Allow all headers
)

# One bus per app, every websocket opens its channel on it
app.state.signal_bus = create_bus()

@app.on_event("startup")
async def startup_event():
  await app.state.signal_bus.start()

@app.on_event("shutdown")
async def shutdown_event():
  await app.state.signal_bus.stop()

@app.get('/')
async def get_homepage():
  return {"channel": settings.SIGNAL_CHANNEL_NAME}

app.include_router(signal_router, prefix="/api/signal", tags=["signals"])
