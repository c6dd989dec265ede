"""JSON files backed by pydantic models.

Only the configuration file goes through here; light state is never
written to disk. Writes go to a temporary sibling first and are renamed into
place, and the previous file is kept as ``<name>.bak``.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from milight.exceptions import ConfigFileInvalidError, wrap_pydantic_error

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class PydanticPersistence:
    """
    Load and save pydantic models as JSON.

    Example:
        ```python
        config = PydanticPersistence.load_json(path, MilightConfig)
        PydanticPersistence.save_json(config.model_copy(update={"host": "10.0.0.7"}), path)
        ```
    """

    @staticmethod
    def load_json(path: Path, model_type: type[M]) -> M:
        """
        Read path and validate its content as model_type.

        Raises:
            FileNotFoundError: If path does not exist
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If a value is rejected by the model
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except OSError as e:
            logger.error(f"Could not read {path}: {e}")
            raise ConfigFileInvalidError(str(path), f"Unreadable file: {e}") from e

        if not text.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"{path} is not a valid {model_type.__name__}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def save_json(data: BaseModel, path: Path, indent: int = 2, backup: bool = True) -> None:
        """
        Write data to path atomically, creating parent directories.

        Args:
            data: Model to serialize
            path: Destination file
            indent: JSON indentation
            backup: Copy an existing file to ``<name>.bak`` first

        Raises:
            OSError: If the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        if backup and path.exists():
            shutil.copy2(path, path.with_suffix(path.suffix + ".bak"))

        staging = path.with_suffix(path.suffix + ".tmp")
        try:
            staging.write_text(data.model_dump_json(indent=indent), encoding="utf-8")
            staging.replace(path)
        finally:
            staging.unlink(missing_ok=True)
        logger.debug(f"Saved {type(data).__name__} to {path}")

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[M], default_factory: Callable[[], M] | None = None
    ) -> M:
        """
        Like ``load_json``, but a missing file yields a default model.

        A file that exists but is invalid still raises; it is never
        overwritten with defaults.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"{path} not found, using default {model_type.__name__}")
            return default_factory() if default_factory else model_type()
