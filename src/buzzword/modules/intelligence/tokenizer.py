"""Morphological tokenizer adapter.

The rest of the package only depends on the ``Tokenizer`` protocol. The
default implementation wraps SudachiPy with the core system dictionary and
an optional compiled user dictionary.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from ...core.exceptions import ConfigurationError
from .tokens import RawToken

logger = logging.getLogger(__name__)


@runtime_checkable
class Tokenizer(Protocol):
    def tokenize(self, text: str) -> list[RawToken]: ...


class SudachiTokenizer:
    """Sudachi tokenizer in split mode C (longest units).

    Lazily imports sudachipy so importing this module stays cheap.
    """

    def __init__(self, user_dict: str | Path | None = None, dict_name: str = "core"):
        try:
            from sudachipy import Dictionary, SplitMode
        except ImportError as e:
            raise ConfigurationError(
                "sudachipy is not installed. Install with: pip install sudachipy sudachidict_core"
            ) from e

        user_dict_path = self._find_user_dict(user_dict) if user_dict else None
        try:
            if user_dict_path:
                # Sudachi reads the config only while building the dictionary
                with tempfile.TemporaryDirectory(prefix="buzzword-sudachi-") as config_dir:
                    config_path = Path(config_dir) / "sudachi.json"
                    config_path.write_text(
                        json.dumps({"userDict": [str(user_dict_path.resolve())]}), encoding="utf-8"
                    )
                    dictionary = Dictionary(config_path=str(config_path), dict=dict_name)
            else:
                dictionary = Dictionary(dict=dict_name)
        except Exception as e:
            # A user dictionary that exists but cannot be loaded is fatal
            raise ConfigurationError(
                f"Failed to load tokenizer dictionary: {e}", user_dict=str(user_dict or "")
            ) from e

        self._tokenizer = dictionary.create(mode=SplitMode.C)
        logger.info(
            "Sudachi tokenizer ready (dict=%s, user_dict=%s)",
            dict_name,
            user_dict_path or "none",
        )

    @staticmethod
    def _find_user_dict(user_dict: str | Path) -> Path | None:
        path = Path(user_dict)
        if not path.exists():
            logger.warning("User dictionary %s not found, using system dictionary only", path)
            return None
        return path

    def tokenize(self, text: str) -> list[RawToken]:
        return [
            RawToken(m.surface(), tuple(m.part_of_speech())) for m in self._tokenizer.tokenize(text)
        ]
