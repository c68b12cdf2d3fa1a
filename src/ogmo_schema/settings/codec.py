"""
Stored defaults for decoding and writing Ogmo files.
"""

from ..codec.api import CodecOptions
from .types import SettingsSection


class CodecSettings(SettingsSection):
    """Codec switches stored under ``codec/``."""

    @property
    def preserve_unknown_fields(self) -> bool:
        """Keep keys the models don't know and write them back."""
        return self._get_bool("codec/preserve_unknown_fields", True)

    @preserve_unknown_fields.setter
    def preserve_unknown_fields(self, value: bool) -> None:
        self._set("codec/preserve_unknown_fields", value)

    @property
    def indent(self) -> bool:
        """Pretty-print written files."""
        return self._get_bool("codec/indent", False)

    @indent.setter
    def indent(self, value: bool) -> None:
        self._set("codec/indent", value)

    def options(self) -> CodecOptions:
        """Build the codec options these settings describe."""
        return CodecOptions(
            preserve_unknown_fields=self.preserve_unknown_fields,
            indent=self.indent,
        )
