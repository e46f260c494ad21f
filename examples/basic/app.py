"""Basic autoroute demo on a chirp app.

Run from this directory::

    pip install autoroute[chirp]
    python app.py

Routes::

    GET    /api/users
    GET    /api/users/:id
    POST   /api/login
    DELETE /api/users/:id  (protected)
"""

import asyncio
from pathlib import Path

from chirp import App

from autoroute import auto_router
from autoroute.targets import ChirpTarget

CONTROLLERS = Path(__file__).parent / "controllers"

app = App()
target = ChirpTarget(app)


async def setup() -> None:
    router = auto_router({"dir": str(CONTROLLERS), "prefix": "/api"})
    registry = await router(target)
    for route in registry.protected_routes:
        print(f"protected: {route.key}")


if __name__ == "__main__":
    asyncio.run(setup())
    app.run()
