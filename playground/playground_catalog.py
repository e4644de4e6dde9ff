from typing import Any, Optional, Tuple

from playground.playground_config import PlaygroundConfig, join_locator
from playground.playground_datatypes import ExampleRef, ManifestError
from playground.playground_file import file_get
from playground.playground_http import http_get, is_http_locator
from playground.playground_serialize import decode_text, deserialize


def parse_manifest(data: Any) -> Tuple[ExampleRef, ...]:
    """Validate a decoded manifest and turn it into catalog entries, keeping manifest order."""
    if not isinstance(data, list):
        raise ManifestError(f"manifest must be a list, got {type(data).__name__}")
    refs = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ManifestError(f"manifest entry {i} must be a mapping")
        name = entry.get("name")
        file = entry.get("file")
        if not isinstance(name, str) or not isinstance(file, str):
            raise ManifestError(f"manifest entry {i} needs string 'name' and 'file'")
        refs.append(ExampleRef(name=name, file=file))
    return tuple(refs)


class CatalogLoader:
    """Fetches the example manifest and example sources from the examples root."""

    def __init__(self, config: Optional[PlaygroundConfig] = None):
        self.config = config or PlaygroundConfig()

    @property
    def examples_root(self) -> str:
        return self.config.examples_root

    async def fetch(self, locator: str) -> Tuple[bytes, Optional[str]]:
        if is_http_locator(locator):
            return await http_get(locator, self.config.http)
        return await file_get(locator, base_dir=self.config.base_dir)

    async def load_catalog(self) -> Tuple[ExampleRef, ...]:
        locator = self.config.manifest_locator
        body, content_type = await self.fetch(locator)
        try:
            data = deserialize(body, content_type=content_type, locator=locator)
        except ValueError as e:
            raise ManifestError(str(e)) from e
        return parse_manifest(data)

    async def load_example(self, ref: ExampleRef) -> str:
        body, content_type = await self.fetch(join_locator(self.examples_root, ref.file))
        return decode_text(body, content_type=content_type)
