#
# xdatcar.py
#
# This file writes a trajectory in XDATCAR format.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
from auto_outcar.errors import ConsistencyError

import logging
logger = logging.getLogger(__name__)

def format_xdatcar(structures, comment=None):
    """ Return the contents of an XDATCAR file.

    The first structure gives the header (cell, species and counts). Each
    structure gives one "Direct configuration=" block with a 1-based counter.

    Args
    -----
    structures : list of Structure
        All of them must have the same species and counts.
    comment : string, optional
        Title line; the comment of the first structure by default.
    """
    if len(structures) == 0:
        raise ConsistencyError("no structure to write", field="XDATCAR")

    first = structures[0]
    lines = [first.comment if comment is None else comment]
    lines.append("%19.14f" % first.scale)
    for vec in first.cell:
        lines.append("".join(" %21.16f" % v for v in vec))
    lines.append("".join(" %5s" % s for s in first.species))
    lines.append("".join(" %5d" % n for n in first.counts))

    for istep, structure in enumerate(structures):
        if structure.species != first.species or structure.counts != first.counts:
            raise ConsistencyError("species differ from the first structure",
                                   field="XDATCAR step %d" % (istep + 1))
        lines.append("Direct configuration=%6d" % (istep + 1))
        for pos in structure.fractional:
            lines.append("".join(" %11.8f" % v for v in pos))

    lines.append("")
    return "\n".join(lines)

def write_xdatcar(structures, filename, comment=None):
    with open(filename, 'w') as f:
        f.write(format_xdatcar(structures, comment=comment))
    logger.info(" Output %s (%d steps)" % (filename, len(structures)))
