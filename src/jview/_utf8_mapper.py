"""Checkpointed conversion between character offsets and UTF-8 byte offsets."""

from __future__ import annotations

from typing import Final


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


class UTF8PositionMapper:
    """Maps character offsets in a str to offsets in its UTF-8 encoding.

    Parse positions are character indices into the decoded text. Callers
    that hold the original bytes need byte offsets instead, so this mapper
    records a checkpoint every ``checkpoint_interval`` characters and
    measures only the stretch between the nearest checkpoint and the target.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The text to create position mapping for
            checkpoint_interval: Characters between checkpoints
        """
        if checkpoint_interval < 1:
            raise ValueError("checkpoint_interval must be positive")

        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._char_checkpoints: list[int] = []
        self._byte_checkpoints: list[int] = []
        self._is_ascii_only: bool = text.isascii()

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        """Records (char, byte) pairs at regular character intervals."""
        byte_pos = 0
        interval = self.checkpoint_interval

        for char_pos in range(0, len(self.text), interval):
            self._char_checkpoints.append(char_pos)
            self._byte_checkpoints.append(byte_pos)
            byte_pos += _utf8_len(self.text[char_pos : char_pos + interval])

        # End of text is always a checkpoint
        self._char_checkpoints.append(len(self.text))
        self._byte_checkpoints.append(byte_pos)

    def char_to_byte(self, char_pos: int) -> int:
        """Convert character position to byte position.

        Args:
            char_pos: Character position in original text

        Returns:
            Byte position in UTF-8 encoded text
        """
        if not 0 <= char_pos <= len(self.text):
            raise ValueError(f"character position out of range: {char_pos}")

        if self._is_ascii_only:
            return char_pos

        index = min(
            char_pos // self.checkpoint_interval,
            len(self._char_checkpoints) - 1,
        )
        base_char = self._char_checkpoints[index]
        base_byte = self._byte_checkpoints[index]
        return base_byte + _utf8_len(self.text[base_char:char_pos])

