from __future__ import annotations
from collections import OrderedDict
from typing import List, Optional, Tuple
import pygame


class FontCache:
    """
    Tiny LRU cache for pygame.font.Font objects keyed by (path, size, bold).
    """
    def __init__(self, max_entries: int = 16) -> None:
        self._cache: "OrderedDict[Tuple[Optional[str], int, bool], pygame.font.Font]" = OrderedDict()
        self._max = max(1, int(max_entries))

    def get(self, path: Optional[str], size: int, *, bold: bool = False) -> pygame.font.Font:
        k = (path, int(size), bool(bold))
        f = self._cache.get(k)
        if f is not None:
            self._cache.move_to_end(k)
            return f
        if not pygame.font.get_init():
            pygame.font.init()
        f = pygame.font.Font(path, int(size))
        f.set_bold(bool(bold))
        self._cache[k] = f
        while len(self._cache) > self._max:
            self._cache.popitem(last=False)
        return f

    def clear(self) -> None:
        self._cache.clear()


class TextLayout:
    """
    Soft-wrap on spaces with a hard-wrap fallback for very long words,
    then render the lines stacked with a fixed line gap.
    """
    def __init__(self, font: pygame.font.Font, line_spacing: int = 0):
        self.font = font
        self.line_spacing = int(line_spacing)

    def wrap(self, text: str, wrap_w: int) -> List[str]:
        """ Paragraphs split on newlines; runs of spaces collapse to one. """
        if not text:
            return []
        if wrap_w <= 0:
            return text.splitlines()
        lines: List[str] = []
        for para in text.splitlines() or [""]:
            lines.extend(self._wrap_paragraph(para.split(), wrap_w) or [""])
        return lines

    def _wrap_paragraph(self, words: List[str], wrap_w: int) -> List[str]:
        fits = lambda s: self.font.size(s)[0] <= wrap_w
        lines: List[str] = []
        line = ""
        for word in words:
            joined = f"{line} {word}" if line else word
            if fits(joined):
                line = joined
            elif fits(word):
                lines.append(line)
                line = word
            else:
                if line:
                    lines.append(line)
                *full, line = self._split_word(word, fits)
                lines.extend(full)
        if line:
            lines.append(line)
        return lines

    def render_lines(self, lines: List[str], color: Tuple[int, int, int]) -> Tuple[List[pygame.Surface], int]:
        """ Surfaces for already-wrapped lines + their stacked height. """
        surfs = [self.font.render(line, True, color) for line in lines]
        if not surfs:
            return [], 0
        height = sum(s.get_height() for s in surfs) + (len(surfs) - 1) * self.line_spacing
        return surfs, height

    def line_height(self) -> int:
        return self.font.get_linesize()

    @staticmethod
    def _split_word(word: str, fits) -> List[str]:
        """ Greedy character split for a word wider than the line. """
        parts: List[str] = []
        piece = ""
        for ch in word:
            if piece and not fits(piece + ch):
                parts.append(piece)
                piece = ch
            else:
                piece += ch
        parts.append(piece)
        return parts
