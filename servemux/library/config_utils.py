import yaml
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


def load_yaml_file(filepath) -> dict:
    """
    Safely load a YAML file and return its contents as a dictionary.

    Args:
        filepath (str | Path): Path to the YAML file; `~` is expanded.

    Returns:
        dict: Parsed contents of the YAML file, empty for an empty file.

    Raises:
        FileNotFoundError: If the specified file does not exist.
        ValueError: If the file cannot be parsed or is not a dictionary.
    """
    path = Path(filepath).expanduser().resolve()

    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file '{path}': {e}")

    # an empty file means no overrides
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"YAML file '{path}' does not contain a valid dictionary.")

    logger.debug("Loaded config file %s with keys %s", path, list(data))
    return data


def listener_section(config: dict, listener: str, keys) -> dict:
    """
    Flatten a config file into the settings for one listener.

    Top-level entries in `keys` apply to every listener; a mapping under the
    listener's name overrides them. Unknown keys are ignored with a warning.

    Example:
        log_level: INFO
        mux:
          port: 8081
    """
    section = {k: v for k, v in config.items() if k in keys}

    specific = config.get(listener) or {}
    if not isinstance(specific, dict):
        raise ValueError(f"Config section '{listener}' must be a mapping, got {type(specific).__name__}")
    for key, value in specific.items():
        if key in keys:
            section[key] = value
        else:
            logger.warning("Ignoring unknown key '%s' in config section '%s'", key, listener)

    return section
