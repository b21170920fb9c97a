#
# vibrations.py
#
# Extraction of the vibrational modes printed by a finite-difference
# (IBRION = 5-8) run.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import re
import numpy as np

from auto_outcar.errors import FormatError, ConsistencyError
from auto_outcar.outlog.utils import (
    NUMBER, convert, marker_positions, parse_table, take_lines
    )
from auto_outcar.outlog.scalars import parse_dof

## e.g.
##   1 f  =  108.762876 THz   683.376811 2PiTHz 3627.910256 cm-1   449.806 meV
##   3 f/i=    0.022552 THz     0.141700 2PiTHz    0.752260 cm-1     0.093 meV
MODE_HEADER = r"^.*2PiTHz.*cm-1.*$"

def _parse_mode(block, imode):
    """ Frequency [cm^-1], imaginary flag and raw displacement of one mode """
    header = block.splitlines()[0]
    match = re.search(r"2PiTHz\s*(%s)\s*cm-1" % NUMBER, header)
    if match is None:
        raise FormatError("no frequency in mode %d" % imode, field="vibration")
    freq = convert(match.group(1), float, "vibration")
    is_imaginary = "f/i=" in header

    ## skip the header and "X Y Z dx dy dz" lines
    lines = take_lines(block, skip=2, stop=lambda line: line.strip() == "")
    if len(lines) == 0:
        raise FormatError("no displacement in mode %d" % imode, field="vibration")
    table = np.asarray(parse_table(lines, 6, "vibration"))
    return freq, is_imaginary, table[:, 3:]

def parse_raw_modes(text, dof):
    """ The first ``dof`` modes of the text, without mass weighting.

    OUTCAR prints the eigenvectors twice; the modes are taken in document
    order, so the first set is used.

    Return
    -------
    list of (freq, is_imaginary, displacement)
    """
    starts = [start for start, _ in marker_positions(MODE_HEADER, text)]
    if len(starts) < dof:
        raise ConsistencyError("fewer mode headers than degrees of freedom",
                               field="vibration", expected=dof, actual=len(starts))
    return [_parse_mode(text[start:], imode + 1)
            for imode, start in enumerate(starts[:dof])]

def parse_vibrations(text):
    """ Raw modes, or None if the text has no "Degrees of freedom" line """
    dof = parse_dof(text)
    if dof is None:
        return None
    return parse_raw_modes(text, dof)

def divide_by_sqrt_mass(displacement, ion_masses):
    """ Divide each row of ``displacement`` by the square root of the atom mass """
    displacement = np.asarray(displacement, dtype=float)
    ion_masses = np.asarray(ion_masses, dtype=float)
    if len(displacement) != len(ion_masses):
        raise ConsistencyError("numbers of displacements and masses differ",
                               field="vibration", expected=len(ion_masses),
                               actual=len(displacement))
    return displacement / np.sqrt(ion_masses)[:, None]
