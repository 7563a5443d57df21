"""ASGI entrypoint for the wellness tracker API."""

from wellness_tracker.api.app import create_app
from wellness_tracker.containers import build_container

app = create_app(build_container())
