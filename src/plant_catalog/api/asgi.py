"""ASGI entrypoint for the plant catalog bot, served by one long-lived process."""

from plant_catalog.api.app import create_app
from plant_catalog.containers import build_container

app = create_app(build_container())
