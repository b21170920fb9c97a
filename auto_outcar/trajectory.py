#
# trajectory.py
#
# Trajectory of a relaxation/MD run and the vibrational modes of a
# finite-difference run, and their output to files
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import os
import numpy as np
from concurrent.futures import ThreadPoolExecutor

from auto_outcar.errors import FormatError, RangeError
from auto_outcar.utils import index_transform
from auto_outcar.structure.structure import Structure
from auto_outcar.io.poscar import write_poscar
from auto_outcar.io.xdatcar import write_xdatcar
from auto_outcar.io.xsf import write_xsf

import logging
logger = logging.getLogger(__name__)

def _run_parallel(func, indices, nprocs):
    """ Call ``func(index)`` for each index and return the results in order.
    Each call writes an independent file. """
    if nprocs is None or nprocs <= 1 or len(indices) <= 1:
        return [func(i) for i in indices]
    with ThreadPoolExecutor(max_workers=nprocs) as executor:
        futures = [executor.submit(func, i) for i in indices]
        return [f.result() for f in futures]

class Trajectory():
    """ Structures of the ionic steps in order.

    Args
    -----
    structures : list of Structure
    forces : list of array, shape=(natoms,3)

    How to use
    ----------
    >>> outcar = Outcar.from_file("OUTCAR")
    >>> traj = Trajectory.from_outcar(outcar)
    >>> traj.save_as_xdatcar("./out")
    >>> traj.save_as_poscars([-1], "./out")
    """
    def __init__(self, structures, forces):
        if len(structures) != len(forces):
            raise ValueError("Numbers of structures and forces differ.")
        self._structures = list(structures)
        self._forces = [np.asarray(f, dtype=float) for f in forces]

    @classmethod
    def from_outcar(cls, outcar):
        """ One Structure per IonicIteration. Constraints attached to
        ``outcar`` are carried into every structure. """
        structures = []
        forces = []
        for istep, it in enumerate(outcar.ion_iters):
            structures.append(Structure(
                it.cell, outcar.ion_types, outcar.ions_per_type,
                cartesian=it.positions, constraints=outcar.constraints,
                comment="Step %d" % (istep + 1)))
            forces.append(it.forces)
        return cls(structures, forces)

    def __len__(self):
        return len(self._structures)

    @property
    def structures(self):
        return self._structures

    def _check_index(self, index):
        if index < 1 or index > len(self._structures):
            raise RangeError(index, len(self._structures), what="step")

    def structure(self, index):
        """ Structure of the 1-based step ``index`` """
        self._check_index(index)
        return self._structures[index - 1]

    def forces(self, index):
        """ Forces of the 1-based step ``index`` """
        self._check_index(index)
        return self._forces[index - 1]

    def save_as_xdatcar(self, outdir="."):
        from auto_outcar import output_files
        os.makedirs(outdir, exist_ok=True)
        filename = os.path.join(outdir, output_files['xdatcar'])
        write_xdatcar(self._structures, filename)
        return filename

    def save_as_poscar(self, index, outdir=".", fmt=None):
        """ Write the 1-based step ``index`` in POSCAR format

        Args
        -----
        fmt : PoscarFormat, optional
        """
        from auto_outcar import output_files
        self._check_index(index)
        os.makedirs(outdir, exist_ok=True)
        filename = os.path.join(outdir, output_files['poscar'].format(index))
        write_poscar(self._structures[index - 1], filename, fmt=fmt)
        return filename

    def save_as_poscars(self, indices, outdir=".", fmt=None, nprocs=None):
        """ Write the selected steps in POSCAR format.

        Args
        -----
        indices : list of int
            1-based indices. Negative ones count from the last step and 0
            selects all the steps.
        """
        inds = index_transform(indices, len(self._structures))
        if len(inds) == 0:
            logger.warning(" No steps are selected.")
            return []
        for i in inds:
            self._check_index(i)
        filenames = _run_parallel(
            lambda i: self.save_as_poscar(i, outdir, fmt=fmt), inds, nprocs)
        logger.info(" Output %d POSCAR files in %s" % (len(filenames), outdir))
        return filenames

    def save_as_xsf(self, index, outdir="."):
        """ Write the 1-based step ``index`` in XSF format with forces """
        from auto_outcar import output_files
        self._check_index(index)
        os.makedirs(outdir, exist_ok=True)
        structure = self._structures[index - 1]
        filename = os.path.join(outdir, output_files['xsf_step'].format(index))
        write_xsf(filename, structure.lattice, structure.symbols,
                  structure.positions, self._forces[index - 1])
        return filename

    def save_as_xsfs(self, indices, outdir=".", nprocs=None):
        inds = index_transform(indices, len(self._structures))
        for i in inds:
            self._check_index(i)
        return _run_parallel(lambda i: self.save_as_xsf(i, outdir), inds, nprocs)

class Vibrations():
    """ Vibrational modes with the structure they belong to.

    Args
    -----
    cell : array, shape=(3,3)
    symbols : list of string
    positions : array, shape=(natoms,3)
        Cartesian positions of the equilibrium structure.
    modes : list of VibrationalMode
    """
    def __init__(self, cell, symbols, positions, modes):
        self._cell = np.asarray(cell, dtype=float)
        self._symbols = list(symbols)
        self._positions = np.asarray(positions, dtype=float)
        self._modes = list(modes)

    @classmethod
    def from_outcar(cls, outcar):
        """ The header cell and the positions of the first ionic step are
        used as the equilibrium structure. """
        if outcar.vib is None:
            raise FormatError("OUTCAR has no vibrational analysis", field="vibration")
        if len(outcar.ion_iters) == 0:
            raise FormatError("OUTCAR has no ionic step", field="positions")
        return cls(outcar.cell, outcar.symbols,
                   outcar.ion_iters[0].positions, outcar.vib)

    def __len__(self):
        return len(self._modes)

    @property
    def modes(self):
        return self._modes

    def mode(self, index):
        """ Mode of the 1-based ``index`` """
        if index < 1 or index > len(self._modes):
            raise RangeError(index, len(self._modes), what="mode")
        return self._modes[index - 1]

    def save_as_xsf(self, index, outdir="."):
        """ Write the mode in XSF format with its displacement as the vector
        of each atom """
        from auto_outcar import output_files
        mode = self.mode(index)
        os.makedirs(outdir, exist_ok=True)
        filename = os.path.join(outdir, output_files['xsf_mode'].format(index))
        write_xsf(filename, self._cell, self._symbols, self._positions,
                  mode.displacement)
        return filename

    def save_as_xsfs(self, indices, outdir=".", nprocs=None):
        inds = index_transform(indices, len(self._modes))
        for i in inds:
            self.mode(i)
        filenames = _run_parallel(lambda i: self.save_as_xsf(i, outdir), inds, nprocs)
        logger.info(" Output %d modes in %s" % (len(filenames), outdir))
        return filenames
