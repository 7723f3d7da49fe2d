import asyncio
from typing import Optional

import typer
import uvicorn

from blogcms.core import database, exceptions
from blogcms.core.config import settings
from blogcms.core.logging import setup_logging

app = typer.Typer(help="Operator commands for the blog backend.")


# ---------------------------
# Commands
# ---------------------------
@app.command()
def serve(
    host: str = typer.Option(settings.HOST, help="Interface to bind"),
    port: int = typer.Option(settings.PORT, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
):
    """Run the API server."""
    uvicorn.run(
        "blogcms.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


@app.command()
def init_db():
    """Create database tables."""
    setup_logging()
    asyncio.run(database.create_db_and_tables())
    print("✅ Database tables created")


@app.command()
def create_admin(
    username: str,
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Optional unique email"),
    password: str = typer.Option(
        ..., prompt=True, confirmation_prompt=True, hide_input=True
    ),
):
    """Create an admin account."""
    from blogcms.apps.auth.routers.auth_router import get_auth_service

    setup_logging()

    async def _create():
        await database.create_db_and_tables()
        return await get_auth_service().create_admin(
            {"username": username, "password": password, "email": email}
        )

    try:
        result = asyncio.run(_create())
    except exceptions.ServiceException as e:
        print(f"❌ {e.detail}")
        for detail in e.error_details:
            print(f"   - {detail.field}: {detail.message}")
        raise typer.Exit(1)

    print(f"✅ Admin '{result['data'].username}' created (id={result['data'].id})")


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    app()
