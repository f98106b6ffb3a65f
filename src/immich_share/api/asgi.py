"""ASGI entrypoint for the share uploader API."""

from immich_share.api.app import create_app
from immich_share.containers import build_container

app = create_app(build_container())
