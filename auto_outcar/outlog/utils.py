#
# utils.py
#
# Helpers to locate markers in an OUTCAR text and to parse the text around
# them. All the functions are pure: they take the whole text and return new
# objects.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import re

from auto_outcar.errors import FormatError, ParseError

NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"

def convert(token, dtype, field):
    """ Convert a token with ``dtype`` or raise ParseError naming ``field`` """
    try:
        return dtype(token)
    except (TypeError, ValueError):
        raise ParseError("cannot convert to %s" % dtype.__name__, field=field, token=token)

def search_value(pattern, text, field, dtype=float, group=1):
    """ Value of the first match of ``pattern``.

    Raises
    -------
    FormatError : the pattern is not found
    """
    match = re.search(pattern, text, re.MULTILINE)
    if match is None:
        raise FormatError("marker not found", field=field)
    return convert(match.group(group), dtype, field)

def findall_values(pattern, text, field, dtype=float, group=1):
    """ Values of all the matches of ``pattern`` in document order """
    return [convert(m.group(group), dtype, field)
            for m in re.finditer(pattern, text, re.MULTILINE)]

def marker_positions(pattern, text):
    """ (start, end) of every occurrence of ``pattern`` """
    return [(m.start(), m.end()) for m in re.finditer(pattern, text, re.MULTILINE)]

def backward_slices(text, marker):
    """ For each occurrence of ``marker``, the text between the end of the
    previous occurrence (or the beginning of the text) and the start of this
    occurrence.

    Example: with marker "free  energy", each slice holds the electronic
    iterations of one ionic step.
    """
    slices = []
    prev_end = 0
    for start, end in marker_positions(marker, text):
        slices.append(text[prev_end:start])
        prev_end = end
    return slices

def forward_slices(text, marker, sentinel=None):
    """ For each occurrence of ``marker``, the text from the start of this
    occurrence to the next occurrence (or the end of the text). If
    ``sentinel`` is given, each slice is cut before the first match of the
    sentinel following the marker line.
    """
    positions = marker_positions(marker, text)
    slices = []
    for i, (start, end) in enumerate(positions):
        stop = positions[i+1][0] if i + 1 < len(positions) else len(text)
        chunk = text[start:stop]
        if sentinel is not None:
            match = re.compile(sentinel, re.MULTILINE).search(chunk, end - start)
            if match is not None:
                chunk = chunk[:match.start()]
        slices.append(chunk)
    return slices

def last_match(pattern, text):
    """ The last match of ``pattern`` in ``text``, or None """
    match = None
    for match in re.finditer(pattern, text, re.MULTILINE):
        pass
    return match

def numbers_in_line(line, field, dtype=float):
    """ All the numbers in a line. Works for glued columns such as
    "-0.500000000-0.500000000" of fixed-width Fortran output. """
    return [convert(v, dtype, field) for v in re.findall(NUMBER, line)]

def parse_table(lines, ncols, field):
    """ Parse rows which must have exactly ``ncols`` numbers each """
    rows = []
    for il, line in enumerate(lines):
        values = numbers_in_line(line, field)
        if len(values) != ncols:
            raise FormatError("row %d has %d columns, expected %d" % (
                il + 1, len(values), ncols), field=field)
        rows.append(values)
    return rows

def take_lines(text, skip=0, count=None, stop=None):
    """ Lines of ``text`` after skipping ``skip`` lines.

    Args
    -----
    count : int, optional
        Maximum number of lines.
    stop : callable, optional
        Reading stops at the first line for which ``stop(line)`` is True.
    """
    out = []
    for line in text.splitlines()[skip:]:
        if count is not None and len(out) >= count:
            break
        if stop is not None and stop(line):
            break
        out.append(line)
    return out
