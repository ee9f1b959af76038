from __future__ import annotations

import logging
from pathlib import Path

import yaml

from rec_browser.config.model import InputSpec
from rec_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SPEC_FILE = "spec.yml"


def load_input_spec(path: Path) -> InputSpec:
    """
    Load and validate an input spec from a YAML file.

    Expected structure:

        attrs:
          - name: name
            type: String
          - name: ts
            type: DateTime
        group_by: [name]
        show_in_grouped: []
        timeline: ts

    :param path: path to the YAML file
    :return: a validated InputSpec
    :raises FileNotFoundError: if the file does not exist
    :raises ConfigError: if the YAML is malformed or the spec is inconsistent
    """
    logger.info("Loading input spec", extra={"spec_path": str(path)})

    if not path.is_file():
        raise FileNotFoundError(f"File not found at {path}")

    with path.open("r", encoding="utf-8") as fp:
        try:
            raw = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse input spec {path}: {exc}") from exc

    try:
        spec = InputSpec.from_raw(raw, source_path=path)
    except ConfigError as exc:
        logger.error(
            "Invalid input spec",
            extra={"spec_path": str(path), "error": str(exc)},
        )
        raise

    logger.info(
        "Input spec loaded",
        extra={
            "spec_path": str(path),
            "attrs": [a.name for a in spec.attrs],
            "group_by": spec.group_by,
            "timeline": spec.timeline,
        },
    )
    return spec
