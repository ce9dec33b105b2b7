from pathlib import Path
from typing import Annotated, Any

import orjson
import typer
import yaml
from loguru import logger

from esquery.config.general import CONFIG
from esquery.config.logger import configure_logging
from esquery.config.write_configs import write_default_configs
from esquery.dsl.batch import render_batch
from esquery.dsl.document import QueryDocument, to_json
from esquery.dsl.loader import document_from_dict
from esquery.dsl.renderer import ClauseRenderer
from esquery.errors import QueryRenderError

app = typer.Typer(help="Render search requests into query DSL JSON.")


def load_request(path: Path) -> QueryDocument:
    """Read a JSON or YAML request file into a query document."""
    text = path.read_bytes()
    data: Any
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = orjson.loads(text)
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise typer.BadParameter(f"{path} is not valid: {e}", param_hint="FILES") from e
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a mapping", param_hint="FILES")
    return document_from_dict(data)


@app.callback()
def main() -> None:
    """Set up logging before any command runs."""
    configure_logging()


@app.command()
def render(
    files: Annotated[list[Path], typer.Argument(exists=True, dir_okay=False)],
    batch: Annotated[
        bool, typer.Option("--batch", help="Output a multi-search batch.")
    ] = False,
    pretty: Annotated[
        bool, typer.Option("--pretty", help="Indent single-document output.")
    ] = CONFIG.pretty,
) -> None:
    """Render request files to a query body, or a batch when given several."""
    renderer = ClauseRenderer(CONFIG.render)
    try:
        docs = [load_request(path) for path in files]
        if batch or len(docs) > 1:
            output = render_batch(docs, renderer)
        else:
            output = to_json(docs[0], renderer, indent=pretty) + "\n"
    except QueryRenderError as e:
        logger.error(f"Could not render request: {e}")
        raise typer.Exit(code=1) from e
    typer.echo(output, nl=False)


@app.command("write-config")
def write_config(
    directory: Annotated[Path, typer.Argument(file_okay=False)] = Path("config"),
) -> None:
    """Write the commented default configuration file."""
    path = write_default_configs(directory)
    logger.info(f"Wrote default configuration to {path}")
