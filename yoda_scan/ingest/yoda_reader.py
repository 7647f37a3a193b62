"""Streaming reader for YODA histogram bundles (1D histograms only).

A bundle is line oriented. Only these structures matter:

    BEGIN YODA_HISTO1D /ANALYSIS/pT_yy      <- block open, name = after last '/'
    Title=transverse momentum               <- title (preamble only)
    ...                                     <- other preamble lines: ignored
    # xlow  xhigh  sumw  sumw2 ...          <- bin header: switches to bin mode
    0.0  50.0  1.23  ...                    <- data: xlow xhigh value [extras]
    END YODA_HISTO1D                        <- block close

Per block the parser walks ``OUTSIDE -> PREAMBLE -> BINS -> OUTSIDE``.
Blocks whose name is not tracked go ``OUTSIDE -> SKIP -> OUTSIDE`` and their
content is never parsed.

Classification (:func:`classify_line`) is a pure function of the line and the
current mode; all state lives in :func:`iter_occurrences`.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import AbstractSet, Iterable, Iterator, List, Optional, Tuple

from yoda_scan.errors import BundleParseError
from yoda_scan.models.histogram import Bin, HistogramOccurrence
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)


BLOCK_OPEN = "BEGIN YODA_HISTO1D"
BLOCK_CLOSE = "END YODA_HISTO1D"
TITLE_KEY = "Title="
BIN_HEADER = "# xlow"

# plain decimal or scientific notation; no underscores, nan or inf
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class Mode(Enum):
    OUTSIDE = "outside"
    PREAMBLE = "preamble"
    BINS = "bins"
    SKIP = "skip"


class LineKind(Enum):
    BLOCK_START = "block_start"
    BLOCK_END = "block_end"
    TITLE = "title"
    BIN_HEADER = "bin_header"
    DATA = "data"
    IGNORE = "ignore"


@dataclass(frozen=True)
class ClassifiedLine:
    """
    kind: what the line is in the current mode.
    text: raw histogram name (BLOCK_START), title text (TITLE),
          the stripped line (DATA), otherwise "".
    path: histogram path after the block-open marker (BLOCK_START only).
    """
    kind: LineKind
    text: str = ""
    path: str = ""


_IGNORE = ClassifiedLine(LineKind.IGNORE)
_BLOCK_END = ClassifiedLine(LineKind.BLOCK_END)
_BIN_HEADER = ClassifiedLine(LineKind.BIN_HEADER)


def histogram_name(path: str) -> str:
    """Last path component of a histogram path: '/ATLAS_X/pT_yy' -> 'pT_yy'."""
    return path[path.rfind("/") + 1:].strip()


def classify_line(line: str, mode: Mode) -> ClassifiedLine:
    """Classify one bundle line (without its line terminator) in the given mode."""
    if mode is Mode.OUTSIDE:
        if line[:len(BLOCK_OPEN)] == BLOCK_OPEN:
            path = line[len(BLOCK_OPEN):].strip()
            return ClassifiedLine(LineKind.BLOCK_START, text=histogram_name(path), path=path)
        return _IGNORE

    if line[:len(BLOCK_CLOSE)] == BLOCK_CLOSE:
        return _BLOCK_END

    if mode is Mode.SKIP:
        return _IGNORE

    if mode is Mode.BINS:
        stripped = line.strip()
        if not stripped:
            return _IGNORE
        return ClassifiedLine(LineKind.DATA, text=stripped)

    # preamble
    if line[:len(TITLE_KEY)] == TITLE_KEY:
        return ClassifiedLine(LineKind.TITLE, text=line[len(TITLE_KEY):])
    if line[:len(BIN_HEADER)] == BIN_HEADER:
        return _BIN_HEADER
    return _IGNORE


def _parse_number(token: str) -> float:
    if _NUMBER_RE.fullmatch(token) is None:
        raise ValueError(f"not a decimal number: {token!r}")
    x = float(token)
    if not math.isfinite(x):
        raise ValueError(f"number out of range: {token!r}")
    return x


def parse_bin(text: str) -> Bin:
    """
    Parse 'xlow xhigh value [...]'; extra columns are ignored.

    The first three columns must be finite decimal numbers (plain or
    scientific notation). ``nan``/``inf`` spellings are rejected in every
    column, values included. Raises ValueError.
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise ValueError(f"expected at least 3 numeric columns, got {len(tokens)}")
    xlow, xhigh, value = (_parse_number(t) for t in tokens[:3])
    return Bin(xlow=xlow, xhigh=xhigh, value=value)


@dataclass
class _OpenBlock:
    name: str
    path: str
    first_line: int
    title: str = ""
    bins: List[Bin] = field(default_factory=list)

    def finish(self) -> HistogramOccurrence:
        return HistogramOccurrence(name=self.name, title=self.title, bins=tuple(self.bins), path=self.path)


def iter_occurrences(
    lines: Iterable[str],
    tracked: AbstractSet[str],
    *,
    source: Optional[str] = None,
    scan_point: Optional[str] = None,
) -> Iterator[HistogramOccurrence]:
    """
    Yield one HistogramOccurrence per tracked block, in bundle order.

    Duplicated names are yielded as they come; rejecting them is the
    aggregator's job. Raises BundleParseError on a malformed data line or on
    a tracked block left open at end of input.
    """
    mode = Mode.OUTSIDE
    block: Optional[_OpenBlock] = None

    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        c = classify_line(line, mode)
        kind = c.kind

        if kind is LineKind.IGNORE:
            continue

        if kind is LineKind.BLOCK_START:
            if c.text in tracked:
                block = _OpenBlock(name=c.text, path=c.path, first_line=lineno)
                mode = Mode.PREAMBLE
            else:
                mode = Mode.SKIP
            continue

        if kind is LineKind.BLOCK_END:
            if block is not None:
                yield block.finish()
            block = None
            mode = Mode.OUTSIDE
            continue

        if block is None:
            # untracked blocks only ever yield BLOCK_END
            continue
        if kind is LineKind.TITLE:
            block.title = c.text
        elif kind is LineKind.BIN_HEADER:
            mode = Mode.BINS
        elif kind is LineKind.DATA:
            try:
                block.bins.append(parse_bin(c.text))
            except ValueError as e:
                raise BundleParseError(
                    f"malformed bin line {lineno} in {source or '<stream>'}: {c.text!r} ({e})",
                    histogram=block.name,
                    scan_point=scan_point,
                    path=source,
                    line=lineno,
                    text=c.text,
                ) from None

    if block is not None:
        raise BundleParseError(
            f"block opened at line {block.first_line} in {source or '<stream>'} is never closed",
            histogram=block.name,
            scan_point=scan_point,
            path=source,
            line=block.first_line,
        )


class YodaBundleReader:
    """
    Reads the tracked 1D histograms of one bundle file.

    Contract:
      - Only blocks whose name is in ``tracked`` are parsed; everything else
        is skipped without looking at its content.
      - Bins are returned in file order; no sorting, no rebinning.
      - Values are the third column of each data line as written.
      - The file is closed on every exit path.
    """

    def __init__(self, tracked: Iterable[str]):
        self.tracked = frozenset(tracked)

    def read(self, path: str | Path, scan_point: Optional[str] = None) -> Tuple[HistogramOccurrence, ...]:
        p = Path(path)
        with open(p, "r", encoding="utf-8", errors="replace") as f:
            occurrences = tuple(iter_occurrences(f, self.tracked, source=str(p), scan_point=scan_point))
        logger.debug("%s: %d tracked histogram block(s)", p, len(occurrences))
        return occurrences

    def read_text(self, text: str, scan_point: Optional[str] = None) -> Tuple[HistogramOccurrence, ...]:
        """Parse bundle content already held in memory."""
        return tuple(iter_occurrences(text.splitlines(), self.tracked, scan_point=scan_point))
