#
# utils.py
#
# Conversion between Structure and the structure objects of ASE and pymatgen
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np

import ase
from ase.constraints import FixAtoms, FixCartesian, FixScaled
import pymatgen.core.structure as str_pmg

from auto_outcar.structure.structure import Structure

import logging
logger = logging.getLogger(__name__)

def _group_symbols(all_symbols):
    """ Contiguous runs of identical symbols, e.g. [H, H, N, H] ->
    ([H, N, H], [2, 1, 1]) """
    species = []
    counts = []
    for name in all_symbols:
        if len(species) > 0 and species[-1] == name:
            counts[-1] += 1
        else:
            species.append(name)
            counts.append(1)
    return species, counts

def _constraints_from_atoms(atoms):
    """ Selective-dynamics flags from FixAtoms, FixCartesian and FixScaled.
    The mask of ASE is True for a fixed direction while the flag of POSCAR is
    True for a free one. """
    if len(atoms.constraints) == 0:
        return None
    flags = np.ones((len(atoms), 3), dtype=bool)
    for cons in atoms.constraints:
        if isinstance(cons, (FixCartesian, FixScaled)):
            indices = np.atleast_1d(cons.index)
            mask = np.broadcast_to(np.asarray(cons.mask, dtype=bool), (len(indices), 3))
            flags[indices] = ~mask
        elif isinstance(cons, FixAtoms):
            flags[cons.get_indices()] = False
        else:
            logger.warning(" Constraint %s is ignored." % type(cons).__name__)
    return flags

def _constraints_to_atoms(atoms, constraints):
    fixed = ~np.asarray(constraints, dtype=bool)
    cons_list = []
    fully_fixed = []
    for idx in range(len(atoms)):
        if fixed[idx].all():
            fully_fixed.append(idx)
        elif fixed[idx].any():
            cons_list.append(FixCartesian([idx], mask=fixed[idx]))
    if len(fully_fixed) > 0:
        cons_list.append(FixAtoms(indices=fully_fixed))
    if len(cons_list) > 0:
        atoms.set_constraint(cons_list)

def change_structure_format(structure, format='ase'):
    """ Convert a structure to another format.

    Args
    -----
    structure : Structure, ase.Atoms, or pymatgen's (I)Structure
    format : string
        'ase' (or 'atoms'), 'pmg' (IStructure), 'pmg-structure' (Structure)
        or 'auto' (auto_outcar's Structure).

    Return
    ------
    Structure object of the given format
    """
    constraints = None
    if isinstance(structure, Structure):

        lattice = structure.lattice
        all_symbols = structure.symbols
        coords = structure.fractional
        constraints = structure.constraints

    elif (isinstance(structure, str_pmg.Structure) or
          isinstance(structure, str_pmg.IStructure)):

        ## from pymatgen's (I)Structure object
        lattice = structure.lattice.matrix
        all_symbols = [specie.name for specie in structure.species]
        coords = structure.frac_coords

    elif isinstance(structure, ase.Atoms):

        lattice = structure.cell.array
        all_symbols = structure.get_chemical_symbols()
        coords = structure.get_scaled_positions(wrap=False)
        constraints = _constraints_from_atoms(structure)

    else:
        raise TypeError(" Structure type {} is not supported".format(type(structure)))

    form = format.lower()
    if form == 'auto' or form == 'structure':

        species, counts = _group_symbols(all_symbols)
        return Structure(lattice, species, counts, fractional=coords,
                         constraints=constraints)

    elif 'pymatgen' in form or 'pmg' in form:

        if constraints is not None:
            logger.debug(" Selective dynamics flags are not carried into pymatgen.")
        if form == 'pymatgen-structure' or form == 'pmg-structure':
            return str_pmg.Structure(lattice, all_symbols, coords)
        else:
            return str_pmg.IStructure(lattice, all_symbols, coords)

    elif form == 'ase' or form == 'atoms':

        atoms = ase.Atoms(
            cell=lattice,
            scaled_positions=coords,
            symbols=all_symbols,
            pbc=True
            )
        if constraints is not None:
            _constraints_to_atoms(atoms, constraints)
        return atoms

    else:
        raise ValueError(" Structure type '{}' is not supported.".format(format))
