import base64
import json
from typing import Any

import yaml


def _normalize(obj: Any) -> Any:
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return [_normalize(x) for x in sorted(obj)]

    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [_normalize(x) for x in obj]

    return obj


class JsonRenderer:
    def render(self, data: Any) -> str:
        return json.dumps(_normalize(data), indent=2, sort_keys=False)


class YamlRenderer:
    def render(self, data: Any) -> str:
        return yaml.safe_dump(_normalize(data), sort_keys=False)
