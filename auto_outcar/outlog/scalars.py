#
# scalars.py
#
# Extractors of the global (run-wide) values of an OUTCAR. Each function
# takes the whole text and returns a new value, or raises FormatError naming
# the missing field.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import re
import numpy as np

from auto_outcar.errors import FormatError
from auto_outcar.outlog.utils import (
    NUMBER, convert, search_value, findall_values, marker_positions,
    numbers_in_line, take_lines
    )

def parse_ispin(text):
    """ ISPIN  =      1    spin polarized calculation? """
    return search_value(r"ISPIN\s*=\s*(\d+)", text, "ispin", dtype=int)

def parse_lsorbit(text):
    """ LSORBIT =      F    spin-orbit coupling

    OUTCARs of collinear builds may not print LSORBIT at all, which means
    no spin-orbit coupling.
    """
    match = re.search(r"LSORBIT\s*=\s*([TF])", text)
    if match is None:
        return False
    return match.group(1) == 'T'

def parse_ibrion(text):
    """ IBRION =      5    ionic relax: 0-MD 1-quasi-New 2-CG """
    return search_value(r"IBRION\s*=\s*(-?\d+)", text, "ibrion", dtype=int)

def parse_nions(text):
    return search_value(r"NIONS\s*=\s*(\d+)", text, "nions", dtype=int)

def parse_nkpts_nbands(text):
    """ k-points  NKPTS =  1  k-points in BZ  NKDIM =  1  number of bands  NBANDS=  8 """
    match = re.search(r"NKPTS\s*=\s*(\d+).*NBANDS\s*=\s*(\d+)", text)
    if match is None:
        raise FormatError("marker not found", field="nkpts/nbands")
    return (convert(match.group(1), int, "nkpts"),
            convert(match.group(2), int, "nbands"))

def parse_efermi(text):
    """ E-fermi :  -0.7865     XC(G=0):  -2.0223     alpha+bet : -0.5051 """
    return search_value(r"E-fermi\s*:\s*(%s)" % NUMBER, text, "efermi")

def _parse_cell_at(text, start, field):
    lines = take_lines(text[start:], skip=1, count=3)
    if len(lines) < 3:
        raise FormatError("incomplete lattice vectors", field=field)
    cell = []
    for line in lines:
        values = numbers_in_line(line, field)
        if len(values) < 3:
            raise FormatError("incomplete lattice vectors", field=field)
        cell.append(values[:3])
    return np.asarray(cell)

def parse_cells(text):
    """ All the "direct lattice vectors" blocks in document order """
    return [_parse_cell_at(text, start, "cell")
            for start, _ in marker_positions(r"direct lattice vectors", text)]

def parse_cell(text):
    """ The first "direct lattice vectors" block, i.e. the initial cell """
    positions = marker_positions(r"direct lattice vectors", text)
    if len(positions) == 0:
        raise FormatError("marker not found", field="cell")
    return _parse_cell_at(text, positions[0][0], "cell")

def parse_ions_per_type(text):
    """ ions per type =               3   1 """
    match = re.search(r"ions per type =(.*)$", text, re.MULTILINE)
    if match is None:
        raise FormatError("marker not found", field="ions per type")
    counts = [convert(v, int, "ions per type") for v in match.group(1).split()]
    if len(counts) == 0:
        raise FormatError("no values", field="ions per type")
    return counts

def parse_ion_types(text):
    """ Species labels from the "POTCAR:" lines.

    The POTCAR titles are printed twice in OUTCAR; only the first half is
    used. "PAW_PBE Fe_pv 06Sep2000" gives "Fe".
    """
    labels = []
    for match in re.finditer(r"^ POTCAR:(.*)$", text, re.MULTILINE):
        data = match.group(1).split()
        if len(data) < 2:
            raise FormatError("unexpected POTCAR line '%s'" % match.group(0).strip(),
                              field="ion types")
        labels.append(data[1].split("_")[0])
    if len(labels) == 0:
        raise FormatError("marker not found", field="ion types")
    return labels[:len(labels) - len(labels) // 2]

def parse_masses_per_type(text):
    """ POMASS =    1.000; ZVAL   =    1.000    mass and valenz """
    masses = findall_values(r"POMASS\s*=\s*(%s);\s*ZVAL" % NUMBER, text, "masses")
    if len(masses) == 0:
        raise FormatError("marker not found", field="masses")
    return masses

def expand_masses(masses_per_type, ions_per_type):
    """ Broadcast the mass of each species to the atoms of the species """
    if len(masses_per_type) < len(ions_per_type):
        raise FormatError("%d masses for %d species" % (
            len(masses_per_type), len(ions_per_type)), field="masses")
    ion_masses = []
    for mass, n in zip(masses_per_type, ions_per_type):
        ion_masses.extend([mass] * n)
    return np.asarray(ion_masses)

def parse_dof(text):
    """ Degrees of freedom DOF   =           3

    Return
    -------
    int, or None if the run has no vibrational analysis
    """
    match = re.search(r"Degrees of freedom DOF\s*=\s*(\d+)", text)
    if match is None:
        return None
    return convert(match.group(1), int, "dof")
