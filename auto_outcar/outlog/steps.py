#
# steps.py
#
# Extractors of the per-ionic-step values of an OUTCAR. Each function returns
# a list with one entry per occurrence of its marker, in document order.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np

from auto_outcar.errors import FormatError, ConsistencyError
from auto_outcar.outlog.utils import (
    NUMBER, convert, findall_values, backward_slices, forward_slices,
    last_match, numbers_in_line, parse_table, take_lines
    )
from auto_outcar.outlog.scalars import parse_cells

## The ionic-step versions of the energy lines have two blanks after "free"
## and "energy"; the electronic-step versions have one.
FREE_ENERGY_MARKER = r"free  energy   TOTEN"

def parse_toten(text):
    """ free  energy   TOTEN  =       -19.26550806 eV """
    return findall_values(r"free  energy   TOTEN  =\s*(%s) eV" % NUMBER, text, "toten")

def parse_toten_z(text):
    """ energy(sigma->0) of the lines
    "energy  without entropy=  -19.27710387  energy(sigma->0) =  -19.26937333"
    """
    return findall_values(
        r"energy  without entropy=\s*(%s)\s+energy\(sigma->0\) =\s*(%s)" % (NUMBER, NUMBER),
        text, "toten_z", group=2)

def parse_cputime(text):
    """ Real time [sec] of "LOOP+:  cpu time  2.0921: real time  2.0863" """
    return findall_values(r"LOOP\+:\s+cpu time.*real time\s+(%s)" % NUMBER, text, "cputime")

def parse_pressure(text):
    """ external pressure =       -6.17 kB  Pullay stress =        0.00 kB """
    return findall_values(r"external pressure =\s*(\S+) kB", text, "pressure")

def _parse_nscf(chunk, istep):
    match = last_match(r"Iteration\s*\d+\(\s*(\d+)\)", chunk)
    if match is None:
        raise FormatError("no 'Iteration' line before step %d" % istep, field="nscf")
    return convert(match.group(1), int, "nscf")

def parse_nscfs(text):
    """ Number of electronic steps of each ionic step, i.e. M of the last
    "Iteration N( M)" line before each "free  energy" line. """
    return [_parse_nscf(chunk, i + 1)
            for i, chunk in enumerate(backward_slices(text, FREE_ENERGY_MARKER))]

def _parse_magmom(chunk):
    match = last_match(r"number of electron\s+%s\s+magnetization(.*)$" % NUMBER, chunk)
    if match is None:
        return None
    values = numbers_in_line(match.group(1), "magmom")
    if len(values) == 0:
        return None
    return values

def parse_magmoms(text):
    """ Total magnetic moment of each ionic step.

    The last "number of electron ... magnetization ..." line before each
    "free  energy" line is used. The number of values is 1 for collinear
    spin-polarized runs and 3 for non-collinear ones.

    Return
    -------
    list of (list of float or None)

    Raises
    -------
    ConsistencyError : some steps have magnetic moments and others do not
    """
    magmoms = [_parse_magmom(chunk) for chunk in backward_slices(text, FREE_ENERGY_MARKER)]
    nfound = sum(1 for m in magmoms if m is not None)
    if 0 < nfound < len(magmoms):
        raise ConsistencyError("magnetization is missing in some steps",
                               field="magmom", expected=len(magmoms), actual=nfound)
    return magmoms

def parse_posforce_single(block):
    """ Positions and forces of a block starting with " POSITION"

    Args
    -----
    block : string
        Text beginning with the " POSITION ... TOTAL-FORCE (eV/Angst)" line.

    Return
    -------
    positions, forces : ndarray, shape=(N,3)
    """
    lines = take_lines(block, skip=2, stop=lambda line: line.startswith(" ----"))
    if len(lines) == 0:
        raise FormatError("empty POSITION block", field="positions")
    table = np.asarray(parse_table(lines, 6, "positions"))
    return table[:, :3], table[:, 3:]

def parse_posforce(text):
    """ Positions and forces of all the ionic steps

    Return
    -------
    positions, forces : list of ndarray
    """
    positions = []
    forces = []
    for block in forward_slices(text, r"^ POSITION", sentinel=r"^\s+total drift"):
        pos, force = parse_posforce_single(block)
        positions.append(pos)
        forces.append(force)
    return positions, forces

def parse_opt_cells(text):
    """ Cell of each ionic step.

    The first "direct lattice vectors" block of OUTCAR belongs to the header
    and the following ones are printed once per ionic step.
    """
    return parse_cells(text)[1:]
