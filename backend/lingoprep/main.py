import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .errors import install_error_handlers
from .settings import settings
from .routers import health
from .routers import auth
from .routers import ai
from .routers import elevenlabs
from .routers import tavus
from .routers import language_test

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("lingoprep")


@asynccontextmanager
async def lifespan(app: FastAPI):
	# Credentials have no built-in defaults; report what is missing up front
	for service, names in settings.missing_configuration().items():
		logger.warning("%s is not configured (missing %s)", service, ", ".join(names))
	yield


app = FastAPI(title="LingoPrep API", lifespan=lifespan)
install_error_handlers(app)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(ai.router)
app.include_router(elevenlabs.router)
app.include_router(tavus.router)
app.include_router(language_test.router)
