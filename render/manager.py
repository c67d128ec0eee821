"""Named registry of cover image generators."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from utils.exceptions import ConfigurationError

from .adapters import AliWanxPosterGenerator, BaseImageGenerator


logger = logging.getLogger(__name__)

GeneratorBuilder = Callable[[], BaseImageGenerator]


class ImageGeneratorFactory:
    """Lazily builds and caches generators by provider name (e.g. ``ALIWANX_POSTER``)."""

    def __init__(self, builders: Optional[Dict[str, GeneratorBuilder]] = None) -> None:
        self._builders: Dict[str, GeneratorBuilder] = {
            "ALIWANX_POSTER": AliWanxPosterGenerator,
        }
        self._generators: Dict[str, BaseImageGenerator] = {}
        for name, builder in dict(builders or {}).items():
            self.register(name, builder)

    def register(self, name: str, builder: GeneratorBuilder) -> None:
        key = str(name).strip().upper()
        self._builders[key] = builder
        self._generators.pop(key, None)

    def get_generator(self, name: str) -> BaseImageGenerator:
        key = str(name).strip().upper()
        generator = self._generators.get(key)
        if generator is not None:
            return generator
        builder = self._builders.get(key)
        if builder is None:
            raise ConfigurationError(f"unknown image generator: {name}")
        generator = builder()
        logger.debug(f"image generator created: {key} -> {generator.provider}")
        self._generators[key] = generator
        return generator

    async def close(self) -> None:
        for generator in self._generators.values():
            await generator.close()
        self._generators.clear()
