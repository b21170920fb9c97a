#
# core.py
#
# Outcar class which holds the information extracted from an OUTCAR file
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np
from concurrent.futures import ThreadPoolExecutor

from auto_outcar.errors import ConsistencyError
from auto_outcar.utils import first_success
from auto_outcar.outlog import scalars, steps, vibrations
from auto_outcar.outlog.records import IonicIteration, VibrationalMode
from auto_outcar.io.poscar import read_poscar
from auto_outcar.trajectory import Trajectory

import logging
logger = logging.getLogger(__name__)

## name -> extractor; every extractor takes the whole text
EXTRACTORS = {
    'lsorbit': scalars.parse_lsorbit,
    'ispin': scalars.parse_ispin,
    'ibrion': scalars.parse_ibrion,
    'nions': scalars.parse_nions,
    'nkpts_nbands': scalars.parse_nkpts_nbands,
    'efermi': scalars.parse_efermi,
    'cell': scalars.parse_cell,
    'ions_per_type': scalars.parse_ions_per_type,
    'ion_types': scalars.parse_ion_types,
    'masses': scalars.parse_masses_per_type,
    'toten': steps.parse_toten,
    'toten_z': steps.parse_toten_z,
    'cputime': steps.parse_cputime,
    'pressure': steps.parse_pressure,
    'nscf': steps.parse_nscfs,
    'magmom': steps.parse_magmoms,
    'posforce': steps.parse_posforce,
    'cells': steps.parse_opt_cells,
    'vibrations': vibrations.parse_vibrations,
    }

def extract_fields(text, nprocs=None):
    """ Run all the extractors on the same text concurrently.

    Args
    -----
    text : string
    nprocs : int, optional
        Maximum number of workers. One worker per extractor by default.

    Return
    -------
    dict : name -> extracted value

    Raises
    -------
    The first error raised by an extractor, in the order of EXTRACTORS.
    """
    if nprocs is None:
        nprocs = len(EXTRACTORS)
    with ThreadPoolExecutor(max_workers=max(1, int(nprocs))) as executor:
        futures = {name: executor.submit(func, text)
                   for name, func in EXTRACTORS.items()}
        ## join
        fields = {name: f.result() for name, f in futures.items()}
    return fields

def _check_steps(fields):
    """ Every per-step field must have as many entries as "toten" """
    nsteps = len(fields['toten'])
    positions = fields['posforce'][0]
    per_step = {
        'toten_z': fields['toten_z'],
        'cputime': fields['cputime'],
        'pressure': fields['pressure'],
        'nscf': fields['nscf'],
        'magmom': fields['magmom'],
        'positions': positions,
        'forces': fields['posforce'][1],
        'cells': fields['cells'],
        }
    for name, values in per_step.items():
        if len(values) != nsteps:
            raise ConsistencyError("inconsistent step count", field=name,
                                   expected=nsteps, actual=len(values))
    return nsteps

def _check_ions(fields):
    nions = fields['nions']
    ions_per_type = fields['ions_per_type']
    if sum(ions_per_type) != nions:
        raise ConsistencyError("sum of ions per type differs from NIONS",
                               field="ions per type", expected=nions,
                               actual=sum(ions_per_type))
    if len(fields['ion_types']) != len(ions_per_type):
        raise ConsistencyError("numbers of POTCAR labels and species differ",
                               field="ion types", expected=len(ions_per_type),
                               actual=len(fields['ion_types']))
    for istep, (pos, force) in enumerate(zip(*fields['posforce'])):
        for name, arr in [("positions", pos), ("forces", force)]:
            if len(arr) != nions:
                raise ConsistencyError("wrong number of atoms in step %d" % (istep + 1),
                                       field=name, expected=nions, actual=len(arr))

class Outcar():
    """ Information extracted from an OUTCAR file.

    Args
    -----
    text : string
        Whole contents of OUTCAR.
    nprocs : int, optional
        Number of workers used to extract the fields.
    filename : string, optional
        Only used for messages.

    How to use
    ----------
    >>> outcar = Outcar.from_file("OUTCAR")
    >>> outcar.nions, len(outcar.ion_iters)
    (4, 3)
    >>> outcar.ion_iters[-1].toten
    -19.26817124

    Raises
    -------
    FormatError, ParseError, ConsistencyError
        The text lacks a required field or the fields are inconsistent.
        No partially filled object is returned.
    """
    def __init__(self, text, nprocs=None, filename=None):

        self._filename = filename
        fields = extract_fields(text, nprocs=nprocs)

        nsteps = _check_steps(fields)
        _check_ions(fields)

        self._lsorbit = fields['lsorbit']
        self._ispin = fields['ispin']
        self._ibrion = fields['ibrion']
        self._nions = fields['nions']
        self._nkpts, self._nbands = fields['nkpts_nbands']
        self._efermi = fields['efermi']
        self._cell = np.asarray(fields['cell'])
        self._ions_per_type = list(fields['ions_per_type'])
        self._ion_types = list(fields['ion_types'])
        self._ion_masses = scalars.expand_masses(fields['masses'], self._ions_per_type)
        self._constraints = None

        ## positional zip
        positions, forces = fields['posforce']
        self._ion_iters = [
            IonicIteration(nscf, toten, toten_z, cputime, pressure, magmom,
                           pos, force, cell)
            for nscf, toten, toten_z, cputime, pressure, magmom, pos, force, cell
            in zip(fields['nscf'], fields['toten'], fields['toten_z'],
                   fields['cputime'], fields['pressure'], fields['magmom'],
                   positions, forces, fields['cells'])
            ]

        ## mass weighting after the join; it needs the masses
        self._vib = None
        if fields['vibrations'] is not None:
            self._vib = [
                VibrationalMode(freq, is_imaginary,
                                vibrations.divide_by_sqrt_mass(disp, self._ion_masses))
                for freq, is_imaginary, disp in fields['vibrations']
                ]

        logger.debug(" %d ionic steps, %s vibrational modes" % (
            nsteps, "no" if self._vib is None else len(self._vib)))

    @classmethod
    def from_file(cls, filename, nprocs=None):
        """ Read an OUTCAR file """
        logger.info(" Parsing %s" % filename)
        with open(filename, 'r') as f:
            text = f.read()
        return cls(text, nprocs=nprocs, filename=filename)

    def __repr__(self):
        formula = " ".join("%s%d" % (s, n)
                           for s, n in zip(self._ion_types, self._ions_per_type))
        return "Outcar(%s, nsteps=%d)" % (formula, len(self._ion_iters))

    @property
    def filename(self):
        return self._filename

    @property
    def lsorbit(self):
        return self._lsorbit

    @property
    def ispin(self):
        return self._ispin

    @property
    def ibrion(self):
        return self._ibrion

    @property
    def nions(self):
        return self._nions

    @property
    def nkpts(self):
        return self._nkpts

    @property
    def nbands(self):
        return self._nbands

    @property
    def efermi(self):
        return self._efermi

    @property
    def cell(self):
        """ Cell printed in the header of OUTCAR """
        return self._cell

    @property
    def ions_per_type(self):
        return self._ions_per_type

    @property
    def ion_types(self):
        return self._ion_types

    @property
    def ion_masses(self):
        """ Mass of each atom [amu] """
        return self._ion_masses

    @property
    def ion_iters(self):
        return self._ion_iters

    @property
    def nsteps(self):
        return len(self._ion_iters)

    @property
    def vib(self):
        """ list of VibrationalMode, or None if OUTCAR has no vibrational
        analysis """
        return self._vib

    @property
    def constraints(self):
        """ Selective-dynamics flags (True: free), or None """
        return self._constraints

    @property
    def symbols(self):
        symbols = []
        for s, n in zip(self._ion_types, self._ions_per_type):
            symbols.extend([s] * n)
        return symbols

    def set_constraints(self, constraints):
        """ Attach selective-dynamics flags, e.g. read from POSCAR, to be
        carried into the trajectory.

        Args
        -----
        constraints : array-like of bool, shape=(nions,3), or None
        """
        if constraints is None:
            self._constraints = None
            return
        constraints = np.array(constraints, dtype=bool).reshape(-1, 3)
        if len(constraints) != self._nions:
            raise ConsistencyError("wrong number of constraint rows",
                                   field="constraints", expected=self._nions,
                                   actual=len(constraints))
        self._constraints = constraints

    def set_constraints_from_files(self, filenames):
        """ Read selective-dynamics flags from the first readable POSCAR-like
        file of ``filenames``.

        Return
        -------
        string or None : the file used
        """
        loaders = [(fn, lambda fn=fn: read_poscar(fn).constraints) for fn in filenames]
        try:
            filename, constraints = first_success(loaders)
        except (OSError, ValueError) as e:
            logger.warning(" Constraints cannot be read from %s: %s" % (
                ", ".join(str(fn) for fn in filenames), e))
            return None
        self.set_constraints(constraints)
        if constraints is None:
            logger.debug(" %s has no selective dynamics." % filename)
        else:
            logger.info(" Constraints are read from %s" % filename)
        return filename

    def save_ionic_step_as_xsf(self, index, outdir="."):
        """ Write the 1-based step ``index`` in XSF format with forces """
        return Trajectory.from_outcar(self).save_as_xsf(index, outdir)
