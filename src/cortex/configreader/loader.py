"""Reading and writing cluster configuration documents."""

import io
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from cortex.errors import ConfigFileError


logger = logging.getLogger(__name__)


def read_cluster_config_file(path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    """Read a cluster configuration file.
    
    A missing path or an empty file yields an empty document, which resolves
    to an all-defaults configuration.
    """
    if path is None:
        return {}
        
    config_file = Path(path)
    if not config_file.exists():
        logger.debug(f"Cluster config not found, using defaults: {config_file}")
        return {}
        
    yaml = YAML(typ="safe")
    try:
        data = yaml.load(config_file.read_text())
    except YAMLError as e:
        raise ConfigFileError(f"{config_file}: invalid YAML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"{config_file}: {e}") from e
        
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"{config_file}: expected a mapping at the top level")
        
    logger.debug(f"Loaded cluster config: {config_file}")
    return data


def dump_document(document: Dict[str, Any]) -> str:
    """Render a document as block-style YAML."""
    yaml = YAML()
    yaml.default_flow_style = False
    stream = io.StringIO()
    yaml.dump(dict(document), stream)
    return stream.getvalue()
