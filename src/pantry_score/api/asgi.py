"""ASGI entrypoint for the pantry score service."""

from pantry_score.api.app import create_app
from pantry_score.containers import build_container

app = create_app(build_container())
