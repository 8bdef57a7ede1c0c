"""Post-processors: named string transforms applied after interpolation."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Union

from i18n_core.logging import get_module_logger

logger = get_module_logger()


class PostProcessor(ABC):
    """Base class for post-processors.

    Attributes:
        name: Name used in ``post_process`` options and settings.
    """

    name: str = ""

    @abstractmethod
    def process(self, value: str, key: str, options: Dict[str, Any], translator: Any) -> str:
        """Transform a translated value.

        Args:
            value: The interpolated translation.
            key: The requested key.
            options: Options of the translation call.
            translator: The translator, for processors needing lookups.

        Returns:
            The transformed value.
        """


class PostProcessorRegistry:
    """Registry of post-processors keyed by name."""

    def __init__(self, processors: Iterable[PostProcessor] = ()):
        self.processors: Dict[str, PostProcessor] = {}
        for processor in processors:
            self.add(processor)

    def add(self, processor: PostProcessor) -> None:
        if not processor.name:
            raise ValueError("post-processor requires a name")
        self.processors[processor.name] = processor
        logger.debug("registered_post_processor", name=processor.name)

    def handle(
        self,
        names: Optional[Union[str, Iterable[str]]],
        value: Any,
        key: str,
        options: Dict[str, Any],
        translator: Any,
    ) -> Any:
        """Run ``value`` through the named processors in order."""
        if not names:
            return value
        if isinstance(names, str):
            names = [names]
        for name in names:
            processor = self.processors.get(name)
            if processor is None:
                logger.warning("unknown_post_processor", name=name)
                continue
            value = processor.process(value, key, options, translator)
        return value
