#
# structure.py
#
# Crystal structure snapshot: cell, species blocks, cartesian and fractional
# positions and optional selective-dynamics flags.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import math
import numpy as np

from auto_outcar.errors import FormatError, ConsistencyError, GeometryError, RangeError
from auto_outcar.structure.cell import (
    determinant, inverse, cartesian_to_fractional, fractional_to_cartesian,
    volume as cell_volume
    )

import logging
logger = logging.getLogger(__name__)

_SORT_AXES = {
    'A': ('fractional', 0), 'B': ('fractional', 1), 'C': ('fractional', 2),
    'X': ('cartesian', 0),  'Y': ('cartesian', 1),  'Z': ('cartesian', 2),
    }

class Structure():
    """ Crystallographic snapshot.

    Atoms are stored species by species: atom ``i`` belongs to the species
    block determined by the cumulative sum of ``counts``. All the operations
    that group, split or sort atoms rely on this ordering.

    Args
    -----
    cell : array-like, shape=(3,3)
        Lattice vectors (rows), before being multiplied by ``scale``.
    species : list of string
        Species labels in the order of the blocks.
    counts : list of int
        Number of atoms of each species. Every count must be positive.
    cartesian : array-like, shape=(N,3), optional
        Cartesian positions in the same units as ``cell``.
    fractional : array-like, shape=(N,3), optional
        Fractional positions. Exactly one of ``cartesian`` and ``fractional``
        must be given; the other one is computed.
    constraints : array-like of bool, shape=(N,3), optional
        Selective-dynamics flags as written in POSCAR ('T' is True).
    scale : float
        Universal scaling factor, must be positive.
    comment : string

    How to use
    ----------
    >>> st = Structure(np.eye(3) * 4., ['Si'], [2],
    ...                fractional=[[0, 0, 0], [0.25, 0.25, 0.25]])
    >>> st.natoms
    2
    >>> st.cartesian[1]
    array([1., 1., 1.])
    """
    def __init__(self, cell, species, counts, cartesian=None, fractional=None,
                 constraints=None, scale=1.0, comment=""):

        scale = float(scale)
        if math.isnan(scale) or scale <= 0.:
            raise FormatError("scale must be positive, got %s" % scale, field="scale")

        species = [str(s) for s in species]
        counts = [int(n) for n in counts]
        if len(species) != len(counts):
            raise ConsistencyError("numbers of species labels and counts differ",
                                   field="species", expected=len(species),
                                   actual=len(counts))
        for s, n in zip(species, counts):
            if n <= 0:
                raise FormatError("count of '%s' must be positive, got %d" % (s, n),
                                  field="counts")

        if (cartesian is None) == (fractional is None):
            raise ValueError("Exactly one of cartesian and fractional must be given.")

        self._comment = comment
        self._scale = scale
        self._cell = np.array(cell, dtype=float).reshape(3, 3)
        self._species = species
        self._counts = counts

        natoms = sum(counts)
        if cartesian is not None:
            self._cartesian = np.array(cartesian, dtype=float).reshape(-1, 3)
            _check_length(self._cartesian, natoms, "cartesian")
            self._fractional = cartesian_to_fractional(self._cartesian, self._cell)
        else:
            self._fractional = np.array(fractional, dtype=float).reshape(-1, 3)
            _check_length(self._fractional, natoms, "fractional")
            if inverse(self._cell) is None:
                raise GeometryError("Singular cell", determinant=determinant(self._cell))
            self._cartesian = fractional_to_cartesian(self._fractional, self._cell)

        if constraints is None:
            self._constraints = None
        else:
            self._constraints = np.array(constraints, dtype=bool).reshape(-1, 3)
            _check_length(self._constraints, natoms, "constraints")

    @classmethod
    def _from_arrays(cls, cell, species, counts, cartesian, fractional,
                     constraints, scale, comment):
        """ Build without converting coordinates; both arrays are already
        consistent with each other. """
        obj = cls.__new__(cls)
        obj._comment = comment
        obj._scale = scale
        obj._cell = np.array(cell, dtype=float)
        obj._species = list(species)
        obj._counts = [int(n) for n in counts]
        obj._cartesian = np.array(cartesian, dtype=float)
        obj._fractional = np.array(fractional, dtype=float)
        obj._constraints = None if constraints is None else np.array(constraints, dtype=bool)
        return obj

    def __len__(self):
        return self.natoms

    def __repr__(self):
        formula = " ".join("%s%d" % (s, n) for s, n in zip(self.species, self.counts))
        return "Structure(%s, natoms=%d)" % (formula, self.natoms)

    @property
    def comment(self):
        return self._comment

    @property
    def scale(self):
        return self._scale

    @property
    def cell(self):
        return self._cell

    @property
    def species(self):
        return self._species

    @property
    def counts(self):
        return self._counts

    @property
    def species_counts(self):
        return list(zip(self._species, self._counts))

    @property
    def cartesian(self):
        return self._cartesian

    @property
    def fractional(self):
        return self._fractional

    @property
    def constraints(self):
        return self._constraints

    @property
    def natoms(self):
        return sum(self._counts)

    @property
    def lattice(self):
        """ Lattice vectors multiplied by the scaling factor """
        return self._cell * self._scale

    @property
    def positions(self):
        """ Cartesian positions multiplied by the scaling factor """
        return self._cartesian * self._scale

    @property
    def volume(self):
        return cell_volume(self.lattice)

    @property
    def symbols(self):
        """ Species label of each atom """
        symbols = []
        for s, n in zip(self._species, self._counts):
            symbols.extend([s] * n)
        return symbols

    def block_ranges(self):
        """ (start, end) index range of each species block """
        ranges = []
        start = 0
        for n in self._counts:
            ranges.append((start, start + n))
            start += n
        return ranges

    def species_index_of(self, iatom):
        """ Index of the species block which the 0-based atom ``iatom`` belongs to """
        if iatom < 0 or iatom >= self.natoms:
            raise RangeError(iatom + 1, self.natoms, what="atom")
        bounds = np.cumsum(self._counts)
        return int(np.searchsorted(bounds, iatom + 1))

    def copy(self, comment=None):
        return Structure._from_arrays(
            self._cell, self._species, self._counts,
            self._cartesian, self._fractional, self._constraints,
            self._scale, self._comment if comment is None else comment)

    def with_constraints(self, constraints):
        """ Return a copy with the given selective-dynamics flags """
        if constraints is not None:
            constraints = np.array(constraints, dtype=bool).reshape(-1, 3)
            _check_length(constraints, self.natoms, "constraints")
        return Structure._from_arrays(
            self._cell, self._species, self._counts,
            self._cartesian, self._fractional, constraints,
            self._scale, self._comment)

    def allclose(self, other, atol=1e-6):
        """ Compare cell, species, positions and constraints """
        if self._species != other.species or self._counts != other.counts:
            return False
        if not np.allclose(self.lattice, other.lattice, atol=atol):
            return False
        if not np.allclose(self._fractional, other.fractional, atol=atol):
            return False
        if (self._constraints is None) != (other.constraints is None):
            return False
        if self._constraints is not None:
            return bool(np.array_equal(self._constraints, other.constraints))
        return True

    def split(self, indices, comments=("Structure with selected atoms",
                                       "Structure complement")):
        """ Split the structure into two disjoint structures.

        Args
        -----
        indices : list of int
            0-based indices of the atoms which go into the first structure.
            The order of the atoms is always that of the original structure.

        Return
        -------
        (Structure, Structure) : selected atoms and the complement

        Raises
        -------
        RangeError : an index is out of range
        ConsistencyError : one of the two structures would be empty
        """
        natoms = self.natoms
        for i in indices:
            if i < 0 or i >= natoms:
                raise RangeError(i + 1, natoms, what="atom")

        selected = np.zeros(natoms, dtype=bool)
        selected[list(indices)] = True
        inds_a = np.where(selected)[0]
        inds_b = np.where(~selected)[0]

        if len(inds_a) == 0 or len(inds_b) == 0:
            raise ConsistencyError("splitting leaves an empty structure",
                                   field="split", expected=natoms,
                                   actual=len(inds_a))

        return (self._take(inds_a, comments[0]), self._take(inds_b, comments[1]))

    def _take(self, inds, comment):
        """ Structure made of the atoms ``inds`` (ascending) """
        block = np.repeat(np.arange(len(self._counts)), self._counts)[inds]
        species = []
        counts = []
        for isp, label in enumerate(self._species):
            n = int(np.sum(block == isp))
            if n > 0:
                species.append(label)
                counts.append(n)

        constraints = None
        if self._constraints is not None:
            constraints = self._constraints[inds]

        return Structure._from_arrays(
            self._cell, species, counts,
            self._cartesian[inds], self._fractional[inds], constraints,
            self._scale, comment)

    def sorted_by(self, key):
        """ Stable sort of the atoms within each species block.

        Args
        -----
        key : string
            Axes in priority order. 'A', 'B', 'C' select fractional
            coordinates and 'X', 'Y', 'Z' select cartesian ones
            (case-insensitive), e.g. "zx" or "CAB".

        Return
        -------
        Structure : species order and block boundaries are unchanged
        """
        axes = []
        for ch in key.upper():
            if ch not in _SORT_AXES:
                raise ValueError("Invalid sort axis '%s' in '%s'. Use A, B, C, X, Y "
                                 "or Z." % (ch, key))
            axes.append(_SORT_AXES[ch])
        if len(axes) == 0:
            raise ValueError("Empty sort key.")

        perm = np.arange(self.natoms)
        for start, end in self.block_ranges():
            ## np.lexsort uses the last key as the primary one
            keys = [getattr(self, name)[start:end, col] for name, col in reversed(axes)]
            perm[start:end] = start + np.lexsort(keys)

        constraints = None
        if self._constraints is not None:
            constraints = self._constraints[perm]

        return Structure._from_arrays(
            self._cell, self._species, self._counts,
            self._cartesian[perm], self._fractional[perm], constraints,
            self._scale, self._comment)

def _check_length(array, natoms, name):
    if len(array) != natoms:
        raise ConsistencyError("number of rows differs from the number of atoms",
                               field=name, expected=natoms, actual=len(array))
