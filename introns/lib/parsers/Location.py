# coding: utf_8
"""
Location expressions of the feature table, e.g. ``complement(join(12..45,80..120))``, ``<1..300`` or ``34``.
"""
import re

from ..models.Transcript import Range

COMPLEMENT = "complement("
JOIN = "join("

_partial_markers = re.compile(r"[<>]")
_segment_separator = re.compile(r",\s*")


class Location:
    """
    Parsed location of a feature.

    start/end are the minimum start and maximum end over all segments (1-based, inclusive),
    segments are kept in file order and backward is True for ``complement(...)``.
    """

    def __init__(self, segments, backward):
        self.segments = segments
        self.backward = backward
        self.start = min(s.start for s in segments)
        self.end = max(s.end for s in segments)

    def __repr__(self):
        return f"Location({self.start}..{self.end}, backward={self.backward}, segments={len(self.segments)})"

    @property
    def starts(self):
        return [s.start for s in self.segments]

    @property
    def ends(self):
        return [s.end for s in self.segments]


def location_text(value):
    """
    The location part of a feature block, which is every line before the first qualifier. Long joins wrap over
    several lines and are glued back together.
    """
    lines = []
    for line in value.split('\n'):
        line = line.strip()
        if line.startswith('/'):
            break
        lines.append(line)
    return ''.join(lines)


def _unwrap(text, prefix):
    if not text.startswith(prefix):
        return text, False
    if not text.endswith(')'):
        return None, True
    return text[len(prefix):-1], True


def _parse_coordinate(word):
    word = _partial_markers.sub('', word).strip()
    if not word.isdigit():
        return None
    return int(word)


def parse_location(value):
    """
    Parse the location of a feature block.

    :param value: The raw feature text, qualifiers included
    :return: Location or None when the text is not a location this parser understands
    """
    text = location_text(value)
    if not text:
        return None

    text, backward = _unwrap(text, COMPLEMENT)
    if text is None:
        return None
    text, _ = _unwrap(text, JOIN)
    if text is None:
        return None

    segments = []
    for segment in _segment_separator.split(text):
        words = segment.split('..')
        if len(words) == 1:
            words.append(words[0])
        if len(words) != 2:
            return None
        start = _parse_coordinate(words[0])
        end = _parse_coordinate(words[1])
        if start is None or end is None or end < start:
            return None
        segments.append(Range(start, end))

    if not segments:
        return None
    return Location(segments, backward)
