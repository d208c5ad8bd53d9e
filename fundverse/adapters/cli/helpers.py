"""
Utilitaires partages pour les commandes CLI de FundVerse.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container
- open_clients : recuperation des clients autorises avec sortie propre
"""

from contextlib import contextmanager
from functools import wraps

import typer
from loguru import logger as loguru_logger
from rich.console import Console

from fundverse.container import Container
from fundverse.core.errors import ConfigurationError, NotAuthenticatedError

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("fundverse")
    try:
        yield
    finally:
        loguru_logger.enable("fundverse")


def with_container():
    """
    Decorateur qui injecte un container en premier argument.

    Les clients ouverts pendant la commande sont fermes a la sortie.

    Usage:
        @with_container()
        async def my_command(container, ...):
            manager = container.session_manager()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.session_clients().close()
        return wrapper
    return decorator


async def open_clients(container):
    """
    Retourne (backend, fund_flow) pour la session courante.

    Sans session ou sans identifiant de canister, affiche l'erreur et
    termine la commande avec le code 1.
    """
    try:
        return await container.session_clients().get()
    except NotAuthenticatedError:
        console.print("[red]Non connecte.[/red] Lancez [bold]fundverse login[/bold].")
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration incomplete[/red] : {e}")
        raise typer.Exit(code=1)
