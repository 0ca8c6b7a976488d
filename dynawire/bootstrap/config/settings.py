from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from dynawire.bootstrap.config.loader import get_configfile
from dynawire.core.models.options import CodecOptions


class CodecSettings(BaseModel):
    decode_sets_as_sets: Annotated[
        bool,
        Field(
            description=(
                "Decode the SS, NS and BS wire types into Python sets.\n"
                "When false, they decode into lists in wire order (legacy behaviour)."
            ),
            default=True
        )
    ]

    strip_empty_strings: Annotated[
        bool,
        Field(
            description=(
                "Drop attributes whose value is the empty string before encoding.\n"
                "Legacy behaviour for services that rejected empty attributes;\n"
                "empty strings are preserved by default."
            ),
            default=False
        )
    ]


class ServiceSettings(BaseModel):
    endpoint: Annotated[
        str,
        Field(
            description="URL of the service endpoint requests are posted to.",
            default="http://localhost:8000"
        )
    ]

    timeout: Annotated[
        float,
        Field(
            description="Timeout in seconds for a single HTTP request.",
            default=5.0,
            gt=0
        )
    ]

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint {v} must be an http:// or https:// URL.")
        return v.rstrip("/")


class DynawireConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DYNAWIRE_",
        env_nested_delimiter="__",
        extra="allow"
    )

    codec: Annotated[
        CodecSettings,
        Field(
            description=(
                "Encoder/decoder switches.\n"
                "Read once when the encoder and decoder are built and passed to\n"
                "them explicitly; changing them later has no effect on existing\n"
                "instances."
            ),
            default_factory=CodecSettings
        )
    ]

    service: Annotated[
        ServiceSettings,
        Field(
            description="Where and how requests are sent.",
            default_factory=ServiceSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        configfile = get_configfile()
        if configfile is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=configfile))
        return tuple(sources)

    def to_options(self) -> CodecOptions:
        return CodecOptions(
            decode_sets_as_sets=self.codec.decode_sets_as_sets,
            strip_empty_strings=self.codec.strip_empty_strings,
        )
