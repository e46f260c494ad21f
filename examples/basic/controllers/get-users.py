"""List users."""

_USERS = [
    {"id": "1", "name": "Ada"},
    {"id": "2", "name": "Grace"},
]


async def route(request):
    return {"users": _USERS}
