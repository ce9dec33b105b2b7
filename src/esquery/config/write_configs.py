from pathlib import Path
from typing import Any

from pydantic import BaseModel
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from esquery.config.general import GeneralConfig

HEADER = """Default configuration values.
Generated by `esquery write-config`, edits here are overwritten.
Override values in config/config.yaml or ESQUERY_* environment variables."""


def _yaml_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return commented_defaults(value)
    if isinstance(value, Path):
        return str(value)
    return value


def commented_defaults(model: BaseModel) -> CommentedMap:
    """Map a settings model's values, with field descriptions as end-of-line comments."""
    commented = CommentedMap()
    for name, info in type(model).model_fields.items():
        commented[name] = _yaml_value(getattr(model, name))
        if info.description:
            commented.yaml_add_eol_comment(info.description, key=name)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    return commented


def write_default_configs(directory: Path = Path("config")) -> Path:
    """Write out config defaults, ignoring whatever the environment sets."""
    path = (directory / "config.default.yaml").resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    # model_construct skips the env/.env/yaml sources and keeps field defaults
    commented = commented_defaults(GeneralConfig.model_construct())
    commented.yaml_set_start_comment(HEADER)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    YAML().dump(commented, path)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    return path
