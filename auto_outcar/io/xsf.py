#
# xsf.py
#
# This file writes a structure with a vector per atom (forces or the
# displacement of a vibrational mode) in XSF format of XCrySDen.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np

from auto_outcar.errors import ConsistencyError

import logging
logger = logging.getLogger(__name__)

def format_xsf(cell, symbols, positions, vectors):
    """ Return the contents of an XSF file.

    Args
    -----
    cell : array, shape=(3,3)
        Lattice vectors [Angstrom].
    symbols : list of string
        Species label of each atom.
    positions : array, shape=(N,3)
        Cartesian positions [Angstrom].
    vectors : array, shape=(N,3)
        Forces or displacements written after the positions.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    vectors = np.asarray(vectors, dtype=float).reshape(-1, 3)
    natoms = len(symbols)
    for name, arr in [("positions", positions), ("vectors", vectors)]:
        if len(arr) != natoms:
            raise ConsistencyError("number of rows differs from the number of atoms",
                                   field=name, expected=natoms, actual=len(arr))

    lines = ["CRYSTAL", "PRIMVEC"]
    for vec in np.asarray(cell, dtype=float).reshape(3, 3):
        lines.append("".join(" %14.10f" % v for v in vec))
    lines.append("PRIMCOORD")
    lines.append("%6d %d" % (natoms, 1))
    for symbol, pos, vec in zip(symbols, positions, vectors):
        lines.append("%-3s" % symbol + "".join(" %14.10f" % v for v in pos)
                     + " " + "".join(" %14.10f" % v for v in vec))
    lines.append("")
    return "\n".join(lines)

def write_xsf(filename, cell, symbols, positions, vectors):
    with open(filename, 'w') as f:
        f.write(format_xsf(cell, symbols, positions, vectors))
    logger.debug(" Output %s" % filename)
