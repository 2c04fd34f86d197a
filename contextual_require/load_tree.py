"""Logic for building an Instance tree from a YAML description.

A mapping describes a container, any other value describes a module whose
loaded value is that value. A mapping holding a `$value` key is a module that
also has children:

    Shared:
      Types: {Point: [x, y]}
      Utilities:
        $value: utilities
        StringUtils: strings
"""

from pathlib import Path
from typing import Any

import yaml

from contextual_require.instance import Instance

MODULE_VALUE_KEY = "$value"


def load_tree(path: str | Path, root_name: str = "game") -> Instance:
    """Load a YAML tree description from disk."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        msg = f"Tree file {path} must contain a mapping at the top level"
        raise ValueError(msg)
    return build_tree(data, root_name)


def build_tree(data: dict[str, Any], root_name: str = "game") -> Instance:
    """Build a container named `root_name` holding the described children."""
    root = Instance(root_name)
    _add_children(root, data)
    return root


def _add_children(parent: Instance, data: dict[str, Any]) -> None:
    for name, value in data.items():
        if name == MODULE_VALUE_KEY:
            continue
        if isinstance(value, dict):
            node = Instance(
                str(name),
                is_module=MODULE_VALUE_KEY in value,
                source=value.get(MODULE_VALUE_KEY),
            )
            parent.add_child(node)
            _add_children(node, value)
        else:
            parent.add_child(Instance(str(name), is_module=True, source=value))
