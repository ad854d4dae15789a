"""In-memory view of a key file's text."""

from typing import Optional

from age_key_manager.constants import Constants
from age_key_manager.exceptions import MalformedKeyError
from age_key_manager.key_codec import AgeKeyCodec
from age_key_manager.models import AgeKey


class KeyFileContent:
    """The text of one key file, held for the duration of one operation.

    Text is always normalized to ``\\n`` line terminators in memory; the
    file manager translates to the configured terminator on write. Record
    blocks are only matched on whole lines, never in the middle of one.
    """

    def __init__(self, text: str = ""):
        """Initialize from file text.

        Args:
            text: Raw file content
        """
        self._text = text.replace("\r\n", "\n")

    @property
    def lines(self) -> list[str]:
        """Lines of the content, excluding the final line terminator."""
        if not self._text:
            return []
        return self._text.removesuffix("\n").split("\n")

    def serialize(self) -> str:
        """Return the text to write back.

        Written content is either empty or ends with exactly one line
        terminator.
        """
        text = self._text.rstrip("\n")
        return f"{text}\n" if text else ""

    def _find_span(self, block: str, start: int = 0) -> Optional[tuple[int, int]]:
        """Locate ``block`` starting and ending on line boundaries.

        A plain substring search would also match a block whose last line is
        the prefix of a longer line, such as ``AGE-SECRET-KEY-1AB`` inside
        ``AGE-SECRET-KEY-1ABC``, and then delete part of another record.
        Matches that do not begin and end a line are skipped.
        """
        while True:
            index = self._text.find(block, start)
            if index < 0:
                return None
            end = index + len(block)
            at_line_start = index == 0 or self._text[index - 1] == "\n"
            at_line_end = end == len(self._text) or self._text[end] == "\n"
            if at_line_start and at_line_end:
                return index, end
            start = index + 1

    def contains(self, block: str) -> bool:
        """Check whether the exact block text is present."""
        if not block:
            return False
        return self._find_span(block.removesuffix("\n")) is not None

    def has_public_key(self, public_key: str) -> bool:
        """Check whether a marker line for ``public_key`` is present."""
        return Constants.public_key_marker(public_key) in self.lines

    def find_block(self, public_key: str) -> Optional[str]:
        """Return the raw three-line block anchored at the public key marker.

        Args:
            public_key: Public key to look for

        Returns:
            Block text, or None if no marker line exists

        Raises:
            MalformedKeyError: If the marker is not surrounded by a full record
        """
        lines = self.lines
        marker = Constants.public_key_marker(public_key)
        if marker not in lines:
            return None

        index = lines.index(marker)
        if index == 0 or index + 1 >= len(lines):
            raise MalformedKeyError(f"Incomplete key record for public key {public_key}")
        return "\n".join(lines[index - 1:index + 2])

    def find_key(self, public_key: str) -> Optional[AgeKey]:
        """Decode the record for ``public_key``, or return None if absent."""
        block = self.find_block(public_key)
        if block is None:
            return None
        return AgeKeyCodec.decode(block)

    def keys(self) -> list[AgeKey]:
        """Decode every record in file order.

        Each line beginning with the creation prefix starts a record made of
        that line and the two that follow it.

        Raises:
            MalformedKeyError: If a record is incomplete or unparsable
        """
        lines = self.lines
        keys = []
        for index, line in enumerate(lines):
            if line.startswith(Constants.CREATED_PREFIX()):
                block = lines[index:index + Constants.RECORD_LINE_COUNT()]
                keys.append(AgeKeyCodec.decode("\n".join(block)))
        return keys

    def line_count(self) -> int:
        """Number of lines, ignoring trailing blank lines."""
        text = self._text.rstrip("\n")
        return len(text.split("\n")) if text else 0

    def append(self, block: str) -> bool:
        """Append a block unless it is already present.

        Args:
            block: Record text

        Returns:
            True if the block was appended
        """
        block = block.removesuffix("\n")
        if not block or self.contains(block):
            return False

        text = self._text.rstrip("\n")
        self._text = f"{text}\n{block}\n" if text else f"{block}\n"
        return True

    def remove(self, block: str) -> int:
        """Remove every occurrence of a block together with its line terminator.

        Args:
            block: Record text

        Returns:
            Number of occurrences removed
        """
        block = block.removesuffix("\n")
        if not block:
            return 0
        removed = 0
        span = self._find_span(block)
        while span is not None:
            start, end = span
            if end < len(self._text):
                end += 1
            elif start > 0:
                start -= 1
            self._text = self._text[:start] + self._text[end:]
            removed += 1
            span = self._find_span(block, start)
        return removed
