"""ASGI entrypoint for the FoodLoop API."""

from foodloop.api.app import create_app
from foodloop.containers import build_container

app = create_app(build_container())
