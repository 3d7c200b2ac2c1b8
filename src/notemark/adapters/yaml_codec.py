import io
from typing import Any

import yaml


class FrontmatterError(Exception):
    """Raised when a front matter block cannot be decoded into a mapping."""


class YamlFrontmatter:
    def decode(self, text: str) -> dict[str, Any]:
        """
        Decode the YAML between the front matter fences.

        An empty block decodes to {}. Anything that is not a mapping at the
        top level is rejected, since properties are looked up by key.
        """
        try:
            data = yaml.safe_load(io.StringIO(text))
        except yaml.YAMLError as e:
            raise FrontmatterError(str(e)) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FrontmatterError(
                f"front matter must be a mapping, got {type(data).__name__}"
            )
        return {str(k): v for k, v in data.items()}
