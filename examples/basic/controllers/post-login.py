"""Accept a login form and echo the user name."""


async def route(request):
    form = await request.form()
    return {"user": form.get("username", "")}
