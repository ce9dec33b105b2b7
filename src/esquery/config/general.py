from pathlib import Path
from typing import Annotated, ClassVar, override

from pydantic import AfterValidator, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from esquery.dsl.renderer import RenderSettings
from esquery.types.general import LogLevel


def uppercase(value: str) -> str:
    """Make a string uppercase."""
    return value.upper()


class GeneralConfig(BaseSettings):
    """Command line config. The rendering core never reads it, it is handed settings."""

    log_level: Annotated[
        LogLevel,
        AfterValidator(uppercase),
    ] = Field(
        default="INFO",
        description="Level of application logs to print/keep.",
    )
    log_file: Annotated[
        Path | None,
        Field(description="Also write logs to this file, rotated monthly."),
    ] = None
    pretty: Annotated[
        bool,
        Field(description="Indent single-document output of the command line renderer."),
    ] = False
    render: RenderSettings = RenderSettings()

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(  # pyright:ignore[reportIncompatibleVariableOverride] This is the intended pattern
        case_sensitive=False,
        env_prefix="ESQUERY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="config/config.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    @override
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Ensure proper setting priority order."""
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
        )


CONFIG = GeneralConfig()
