#
# poscar.py
#
# This file reads and writes POSCAR (lattice description) files.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import os
import math
import numpy as np

from auto_outcar.errors import FormatError, ParseError, ConsistencyError
from auto_outcar.structure.structure import Structure
from auto_outcar.utils import index_transform

import logging
logger = logging.getLogger(__name__)

class PoscarFormat():
    """ Options to write a POSCAR file.

    Args
    -----
    fractional : bool, default True
        Write fractional ("Direct") coordinates; cartesian ones if False.
    preserve_constraints : bool, default True
        Write "Selective dynamics" and T/F flags when the structure has them.
    add_symbol_tags : bool, default True
        Append "# <label>-<index in species> <index>" to each coordinate line.

    Defaults are taken from ``auto_outcar.default_poscar_format``.
    """
    def __init__(self, fractional=None, preserve_constraints=None, add_symbol_tags=None):
        from auto_outcar import default_poscar_format as defaults
        self.fractional = (defaults['fractional']
                           if fractional is None else bool(fractional))
        self.preserve_constraints = (defaults['preserve_constraints']
                                     if preserve_constraints is None
                                     else bool(preserve_constraints))
        self.add_symbol_tags = (defaults['add_symbol_tags']
                                if add_symbol_tags is None else bool(add_symbol_tags))

    def as_dict(self):
        return {
            'fractional': self.fractional,
            'preserve_constraints': self.preserve_constraints,
            'add_symbol_tags': self.add_symbol_tags,
            }

    def __repr__(self):
        return "PoscarFormat(%s)" % ", ".join(
            "%s=%s" % (k, v) for k, v in self.as_dict().items())

def _strip_comment(line):
    for sym in ["#", "!"]:
        if sym in line:
            line = line[:line.index(sym)]
    return line

def _to_float(token, field):
    try:
        return float(token)
    except ValueError:
        raise ParseError("not a number", field=field, token=token)

def _to_int(token, field):
    try:
        return int(token)
    except ValueError:
        raise ParseError("not an integer", field=field, token=token)

def _to_flag(token, field):
    if token[:1].upper() == 'T':
        return True
    elif token[:1].upper() == 'F':
        return False
    raise ParseError("selective dynamics flag must be T or F", field=field, token=token)

def parse_poscar(text):
    """ Parse the contents of a POSCAR file.

    Args
    -----
    text : string

    Return
    -------
    Structure

    Raises
    -------
    FormatError : missing line, non-positive scale, incomplete cell,
        unknown coordinate type
    ParseError : non-numeric token
    ConsistencyError : numbers of labels/counts or atoms mismatch
    GeometryError : singular cell
    """
    lines = text.splitlines()
    if len(lines) < 8:
        raise FormatError("too short, %d lines" % len(lines), field="POSCAR")

    comment = lines[0].rstrip()

    ## scaling factor
    data = lines[1].split()
    if len(data) == 0:
        raise FormatError("missing scaling factor", field="scale")
    scale = _to_float(data[0], "scale")
    if math.isnan(scale) or scale <= 0.:
        raise FormatError("invalid scale %s, must be positive" % data[0], field="scale")

    ## lattice vectors
    cell = np.zeros((3, 3))
    for i in range(3):
        data = lines[2 + i].split()
        if len(data) < 3:
            raise FormatError("incomplete cell, line %d has %d values" % (3 + i, len(data)),
                              field="cell")
        cell[i] = [_to_float(v, "cell") for v in data[:3]]

    ## species and counts
    species = [s.split("/")[0] for s in _strip_comment(lines[5]).split()]
    counts = [_to_int(v, "counts") for v in _strip_comment(lines[6]).split()]
    if len(species) == 0:
        raise FormatError("missing species labels", field="species")
    if len(species) != len(counts):
        raise ConsistencyError("numbers of species labels and counts differ",
                               field="species", expected=len(species), actual=len(counts))
    for s, n in zip(species, counts):
        if n <= 0:
            raise FormatError("count of '%s' must be positive, got %d" % (s, n),
                              field="counts")
    natoms = sum(counts)

    ## selective dynamics and coordinate type
    il = 7
    selective = False
    if lines[il].strip()[:1].lower() == 's':
        selective = True
        il += 1
    if il >= len(lines):
        raise FormatError("missing coordinate type line", field="coordinate type")
    ctype = lines[il].strip()[:1].lower()
    if ctype == 'd':
        fractional = True
    elif ctype in ['c', 'k']:
        fractional = False
    else:
        raise FormatError("unrecognized coordinate type '%s'" % lines[il].strip(),
                          field="coordinate type")
    il += 1

    ## atomic positions
    coords = []
    flags = []
    for line in lines[il:]:
        data = line.split()
        if len(data) == 0:
            break
        if len(data) < 3:
            raise FormatError("line %d has %d values" % (il + len(coords) + 1, len(data)),
                              field="positions")
        coords.append([_to_float(v, "positions") for v in data[:3]])
        if selective:
            if len(data) < 6:
                raise FormatError("line %d has no selective dynamics flags" % (
                    il + len(coords)), field="constraints")
            flags.append([_to_flag(v, "constraints") for v in data[3:6]])

    if len(coords) != natoms:
        raise ConsistencyError("count mismatch between species counts and positions",
                               field="positions", expected=natoms, actual=len(coords))

    constraints = flags if selective else None
    if fractional:
        return Structure(cell, species, counts, fractional=coords,
                         constraints=constraints, scale=scale, comment=comment)
    else:
        return Structure(cell, species, counts, cartesian=coords,
                         constraints=constraints, scale=scale, comment=comment)

def read_poscar(filename):
    """ Read a POSCAR file and return Structure """
    with open(filename, 'r') as f:
        text = f.read()
    structure = parse_poscar(text)
    logger.debug(" Read %s: %s" % (filename, repr(structure)))
    return structure

def format_poscar(structure, fmt=None):
    """ Return the contents of a POSCAR file for ``structure``

    Args
    -----
    structure : Structure
    fmt : PoscarFormat, optional
    """
    if fmt is None:
        fmt = PoscarFormat()

    lines = [structure.comment]
    lines.append("%19.14f" % structure.scale)
    for vec in structure.cell:
        lines.append("".join(" %21.16f" % v for v in vec))
    lines.append("".join(" %5s" % s for s in structure.species))
    lines.append("".join(" %5d" % n for n in structure.counts))

    write_flags = fmt.preserve_constraints and structure.constraints is not None
    if write_flags:
        lines.append("Selective dynamics")

    if fmt.fractional:
        lines.append("Direct")
        coords = structure.fractional
    else:
        lines.append("Cartesian")
        coords = structure.cartesian

    symbols = structure.symbols
    local_index = []
    for n in structure.counts:
        local_index.extend(range(1, n + 1))

    for ia, pos in enumerate(coords):
        line = "".join(" %19.16f" % v for v in pos)
        if write_flags:
            line += "".join("   %s" % ("T" if f else "F")
                            for f in structure.constraints[ia])
        if fmt.add_symbol_tags:
            line += "  # %s-%03d %5d" % (symbols[ia], local_index[ia], ia + 1)
        lines.append(line)

    lines.append("")
    return "\n".join(lines)

def write_poscar(structure, filename, fmt=None):
    with open(filename, 'w') as f:
        f.write(format_poscar(structure, fmt=fmt))
    logger.debug(" Output %s" % filename)

def split_poscar(filename, indices, outdir=".", fmt=None):
    """ Split a POSCAR file into two files by atom indices.

    Args
    -----
    filename : string
    indices : list of int
        1-based atom indices of the first structure. Negative ones count
        from the last atom.
    outdir : string

    Return
    -------
    (string, string) : names of the two files
    """
    from auto_outcar import output_files

    structure = read_poscar(filename)
    inds = [i - 1 for i in index_transform(indices, structure.natoms)]
    st_a, st_b = structure.split(inds)

    os.makedirs(outdir, exist_ok=True)
    filenames = []
    for key, st in [('split_a', st_a), ('split_b', st_b)]:
        fn = os.path.join(outdir, output_files[key])
        write_poscar(st, fn, fmt=fmt)
        logger.info(" %s: %s" % (fn, " ".join(
            "%s%d" % (s, n) for s, n in st.species_counts)))
        filenames.append(fn)
    return tuple(filenames)

def convert_poscar(filename, outfile=None, fmt=None):
    """ Rewrite a POSCAR file with another coordinate system or layout.

    Args
    -----
    filename : string
    outfile : string, optional
        ``output_files['converted']`` in the directory of ``filename`` by
        default.
    fmt : PoscarFormat, optional

    Return
    -------
    string : name of the written file
    """
    from auto_outcar import output_files

    if outfile is None:
        outfile = os.path.join(os.path.dirname(filename), output_files['converted'])
    structure = read_poscar(filename)
    write_poscar(structure, outfile, fmt=fmt)
    logger.info(" Converted %s to %s" % (filename, outfile))
    return outfile
