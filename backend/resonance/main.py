"""Point d'entrée en ligne de commande du moteur de résonance."""

from typing import Optional
import json
import logging

import click

from .config import STORAGE_BACKENDS, VALID_MODES, ResonanceConfig, load_config
from .engine import ResonanceEngine
from .errors import InvalidInputError


def _dump(data) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def _engine(ctx: click.Context, **overrides) -> ResonanceEngine:
    """Construit le moteur à partir de la configuration du groupe."""
    config: ResonanceConfig = ctx.obj["config"]
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = config.with_overrides(**overrides)
    engine = ResonanceEngine(config)
    ctx.call_on_close(engine.store.close)
    return engine


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    help="Fichier JSON de configuration",
)
@click.option(
    "--storage",
    type=click.Choice(STORAGE_BACKENDS),
    help="Backend de la mémoire structurale",
)
@click.option(
    "--storage-path",
    type=click.Path(),
    help="Chemin du fichier JSON ou de la base SQLite",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Mode verbeux",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    storage: Optional[str],
    storage_path: Optional[str],
    verbose: bool,
):
    """Moteur de résonance : pivot, noyau, périphérie et mémoire."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = load_config(config_path, storage_backend=storage, storage_path=storage_path)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("text")
@click.option(
    "--mode",
    type=click.Choice(VALID_MODES),
    help="Registre de l'écho",
)
@click.option(
    "--window",
    type=click.IntRange(min=1),
    help="Distance max entre deux tokens liés",
)
@click.option(
    "--no-memory",
    is_flag=True,
    help="N'enregistre pas l'énoncé dans la mémoire",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Sortie JSON complète",
)
@click.pass_context
def analyze(ctx: click.Context, text: str, mode: Optional[str], window: Optional[int],
            no_memory: bool, as_json: bool):
    """Analyse un énoncé et compose son écho."""
    engine = _engine(ctx, window_size=window)
    try:
        response = engine.process(text, mode=mode, disable_memory=no_memory)
    except InvalidInputError as e:
        raise click.BadParameter(str(e), param_hint="TEXT")

    if as_json:
        click.echo(_dump(response))
        return

    if response["pivot"] is None:
        click.echo("Aucun signal : pas de terme significatif.")
        return

    click.echo(f"Pivot      : {response['pivot']}")
    click.echo(f"Noyau      : {', '.join(response['noyau']) or '-'}")
    click.echo(f"Périphérie : {', '.join(response['peripherie']) or '-'}")
    click.echo(f"Écho       : {response['echo']}")
    click.echo(f"Question   : {response['question']}")
    if response["tags"]:
        click.echo(f"Tags       : {' · '.join(response['tags'])}")
    if response["memoire"]:
        click.echo(f"Mémoire    : {response['memoire']}")


@cli.command()
@click.argument("emojis", nargs=-1, required=True)
@click.pass_context
def emojis(ctx: click.Context, emojis: tuple[str, ...]):
    """Enregistre une séquence d'emojis et affiche la constellation."""
    engine = _engine(ctx)
    try:
        response = engine.process_emojis(list(emojis))
    except InvalidInputError as e:
        raise click.BadParameter(str(e), param_hint="EMOJIS")
    click.echo(_dump(response))


@cli.command()
@click.argument("term")
@click.pass_context
def context(ctx: click.Context, term: str):
    """Ce que la mémoire sait d'un terme."""
    engine = _engine(ctx)
    click.echo(_dump(engine.get_memory_context(term).to_dict()))


@cli.command()
@click.pass_context
def state(ctx: click.Context):
    """Affiche la mémoire structurale complète."""
    engine = _engine(ctx)
    click.echo(_dump(engine.state()))


@cli.command()
@click.confirmation_option(prompt="Effacer toute la mémoire ?")
@click.pass_context
def reset(ctx: click.Context):
    """Vide la mémoire structurale."""
    engine = _engine(ctx)
    engine.reset_memory()
    click.echo("Mémoire réinitialisée.")


if __name__ == "__main__":
    cli()
