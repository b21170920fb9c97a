#
# records.py
#
# Records of one ionic step and one vibrational mode
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np

class IonicIteration():
    """ One ionic (relaxation or MD) step.

    Args
    -----
    nscf : int
        Number of electronic steps.
    toten : float
        Free energy TOTEN [eV].
    toten_z : float
        Energy in the limit of sigma -> 0 [eV].
    cputime : float
        Real time of the step [sec].
    pressure : float
        External pressure [kB].
    magmom : list of float or None
        Total magnetic moment. None for non-magnetic runs, one value for
        collinear runs and three for non-collinear ones.
    positions, forces : array, shape=(nions,3)
        Cartesian positions [Angstrom] and forces [eV/Angstrom].
    cell : array, shape=(3,3)
    """
    def __init__(self, nscf, toten, toten_z, cputime, pressure, magmom,
                 positions, forces, cell):
        self._nscf = int(nscf)
        self._toten = float(toten)
        self._toten_z = float(toten_z)
        self._cputime = float(cputime)
        self._pressure = float(pressure)
        self._magmom = None if magmom is None else [float(m) for m in magmom]
        self._positions = np.array(positions, dtype=float)
        self._forces = np.array(forces, dtype=float)
        self._cell = np.array(cell, dtype=float)
        for arr in [self._positions, self._forces, self._cell]:
            arr.flags.writeable = False

    @property
    def nscf(self):
        return self._nscf

    @property
    def toten(self):
        return self._toten

    @property
    def toten_z(self):
        return self._toten_z

    @property
    def cputime(self):
        return self._cputime

    @property
    def pressure(self):
        return self._pressure

    @property
    def magmom(self):
        return None if self._magmom is None else list(self._magmom)

    @property
    def positions(self):
        return self._positions

    @property
    def forces(self):
        return self._forces

    @property
    def cell(self):
        return self._cell

    def __repr__(self):
        return "IonicIteration(nscf=%d, toten=%.8f, toten_z=%.8f)" % (
            self._nscf, self._toten, self._toten_z)

class VibrationalMode():
    """ One vibrational mode.

    Args
    -----
    freq : float
        Frequency [cm^-1] as printed in OUTCAR.
    is_imaginary : bool
    displacement : array, shape=(nions,3)
        Displacement divided by sqrt(mass) of each atom.
    """
    def __init__(self, freq, is_imaginary, displacement):
        self._freq = float(freq)
        self._is_imaginary = bool(is_imaginary)
        self._displacement = np.array(displacement, dtype=float)
        self._displacement.flags.writeable = False

    @property
    def freq(self):
        return self._freq

    @property
    def is_imaginary(self):
        return self._is_imaginary

    @property
    def displacement(self):
        return self._displacement

    def __repr__(self):
        return "VibrationalMode(freq=%.6f%s)" % (
            self._freq, ", imaginary" if self._is_imaginary else "")
