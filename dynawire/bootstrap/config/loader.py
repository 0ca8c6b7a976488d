import os
from pathlib import Path

CONFIG_ENV = "DYNAWIRECONFIG"
DEFAULT_FILENAME = "dynawire.yaml"


def get_configfile() -> Path | None:
    """
    Locate the optional YAML configuration file.

    Priority: DYNAWIRECONFIG environment variable > 'dynawire.yaml' in the
    current working directory. An explicitly configured file must exist;
    the default one is simply skipped when absent.
    """
    raw = os.getenv(CONFIG_ENV)

    if raw is None:
        file = Path.cwd() / DEFAULT_FILENAME
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            f"  - Fix or unset the {CONFIG_ENV} environment variable\n"
            f"  - Or place a '{DEFAULT_FILENAME}' file in the current working directory."
        )

    return file
