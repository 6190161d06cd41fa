from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from math import isqrt


class ClipMode(IntEnum):
    IDLE = 0
    SELECTING = 1


@dataclass
class GenerationState:
    """
    The little we remember between steps.  Each Synthesizer owns one.
    mutation_count only counts deletion and text generation steps,
    clipboard operations are not included.
    """
    block_active: bool = False
    clipboard_full: bool = False
    mutation_count: int = 0

    def __post_init__(self):
        assert self.mutation_count >= 0, f"negative mutation count {self.mutation_count}"

    @property
    def mode(self) -> ClipMode:
        return ClipMode.SELECTING if self.block_active else ClipMode.IDLE

    def mutated(self):
        self.mutation_count += 1

    def start_block(self):
        assert not self.block_active, "start_block: selection already open"
        assert not self.clipboard_full, "start_block: clipboard should be pasted first"
        self.block_active = True

    def end_block(self, clip: bool):
        """Close the selection, optionally filling the clipboard (copy/cut)"""
        assert self.block_active, "end_block: no selection open"
        self.block_active = False
        if clip:
            self.clipboard_full = True

    def paste(self):
        assert self.clipboard_full and not self.block_active, "paste: nothing to paste"
        self.clipboard_full = False

    def undo_limit(self) -> int:
        """Undo/redo pairs go at most isqrt(mutations) deep"""
        return isqrt(self.mutation_count) + 1
