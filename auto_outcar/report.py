#
# report.py
#
# Text tables of the ionic steps and the vibrational modes, and the summary
# of an OUTCAR in YAML format
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import math
import numpy as np
import yaml

from auto_outcar.units import CmToTHz, CmToMeV
from auto_outcar.structure.cell import volume as cell_volume

import logging
logger = logging.getLogger(__name__)

## name, header, width of the value
_COLUMNS = [
    ('energy',     "TOTEN",   11),
    ('energyz',    "TOTEN_z", 11),
    ('log10de',    "LgdE",     4),
    ('favg',       "Favg",     6),
    ('fmax',       "Fmax",     6),
    ('fmax_axis',  "Ax",       2),
    ('fmax_index', "Idx",      3),
    ('nscf',       "SCF",      3),
    ('time',       "Time/m",   6),
    ('volume',     "Volume",   8),
    ('magmom',     "Mag/muB",  7),
    ]

class IterationsFormat():
    """ Switches of the columns of the table of ionic steps.

    Args
    -----
    **switches : bool
        Any of energy, energyz, log10de, favg, fmax, fmax_axis, fmax_index,
        nscf, time, magmom and volume. Defaults are taken from
        ``auto_outcar.default_iterations_format``.

    How to use
    ----------
    >>> fmt = IterationsFormat(energy=True, magmom=False)
    >>> print(format_iterations(outcar, fmt))
    """
    def __init__(self, **switches):
        from auto_outcar import default_iterations_format
        self._switches = dict(default_iterations_format)
        for key, value in switches.items():
            if key not in self._switches:
                raise ValueError("Unknown column '%s'. Available: %s" % (
                    key, ", ".join(self._switches.keys())))
            self._switches[key] = bool(value)

    def as_dict(self):
        return dict(self._switches)

    def enabled(self):
        return [name for name, _, _ in _COLUMNS if self._switches[name]]

def _force_norms(forces, constraints=None):
    """ Norms of the forces; frozen components are ignored """
    forces = np.asarray(forces, dtype=float)
    if constraints is not None:
        forces = forces * np.asarray(constraints, dtype=float)
    return np.linalg.norm(forces, axis=1), forces

def _format_header(fmt):
    line = "%7s" % "#Step"
    switches = fmt.as_dict()
    for name, header, width in _COLUMNS:
        if not switches[name]:
            continue
        if name == 'magmom':
            line += " %s" % header
        else:
            line += " %*s" % (width, header)
    return line

def format_iterations(outcar, fmt=None):
    """ Table of the ionic steps, one line per step.

    Args
    -----
    outcar : Outcar
    fmt : IterationsFormat, optional

    Return
    -------
    string
    """
    if fmt is None:
        fmt = IterationsFormat()
    sw = fmt.as_dict()

    lines = [_format_header(fmt)]
    prev = None
    for istep, it in enumerate(outcar.ion_iters):
        line = "%7d" % (istep + 1)

        if sw['energy']:
            line += " %11.5f" % it.toten
        if sw['energyz']:
            line += " %11.5f" % it.toten_z
        if sw['log10de']:
            de = None if prev is None else abs(it.toten_z - prev)
            if de is None or de == 0.:
                line += " %4s" % "-"
            else:
                line += " %4.1f" % math.log10(de)
        prev = it.toten_z

        norms, forces = _force_norms(it.forces, outcar.constraints)
        imax = int(np.argmax(norms))
        if sw['favg']:
            line += " %6.3f" % np.mean(norms)
        if sw['fmax']:
            line += " %6.3f" % norms[imax]
        if sw['fmax_axis']:
            line += " %2s" % "XYZ"[int(np.argmax(np.abs(forces[imax])))]
        if sw['fmax_index']:
            line += " %3d" % (imax + 1)
        if sw['nscf']:
            line += " %3d" % it.nscf
        if sw['time']:
            line += " %6.2f" % (it.cputime / 60.)
        if sw['volume']:
            line += " %8.2f" % cell_volume(it.cell)
        if sw['magmom']:
            if it.magmom is None:
                line += "   NoMag"
            else:
                line += "".join(" %7.3f" % m for m in it.magmom)
        lines.append(line)

    lines.append("")
    return "\n".join(lines)

def format_vibrations(modes):
    """ Table of vibrational modes with frequencies in THz, cm^-1 and meV

    Args
    -----
    modes : list of VibrationalMode
    """
    lines = ["%5s %12s %12s %12s %4s" % ("#Mode", "THz", "cm-1", "meV", "")]
    for imode, mode in enumerate(modes):
        lines.append("%5d %12.6f %12.6f %12.6f %4s" % (
            imode + 1, mode.freq * CmToTHz, mode.freq, mode.freq * CmToMeV,
            "f/i" if mode.is_imaginary else "f"))
    lines.append("")
    return "\n".join(lines)

def get_summary(outcar):
    """ Dictionary of the global values and the ionic steps of an Outcar """
    params = {}

    ### global values
    params["ispin"] = outcar.ispin
    params["lsorbit"] = outcar.lsorbit
    params["ibrion"] = outcar.ibrion
    params["nions"] = outcar.nions
    params["nkpts"] = outcar.nkpts
    params["nbands"] = outcar.nbands
    params["efermi"] = float(outcar.efermi)
    params["cell"] = np.asarray(outcar.cell).tolist()
    params["ion_types"] = list(outcar.ion_types)
    params["ions_per_type"] = [int(n) for n in outcar.ions_per_type]
    params["ion_masses"] = np.asarray(outcar.ion_masses).tolist()

    ### ionic steps
    params["steps"] = []
    for it in outcar.ion_iters:
        params["steps"].append({
            "nscf": it.nscf,
            "toten": it.toten,
            "toten_z": it.toten_z,
            "cputime": it.cputime,
            "pressure": it.pressure,
            "magmom": it.magmom,
            })

    ### vibrational modes
    if outcar.vib is not None:
        params["vibrations"] = [
            {"freq": mode.freq, "imaginary": mode.is_imaginary}
            for mode in outcar.vib]

    return params

def write_summary(outcar, outfile):
    """ Output the summary of an Outcar in YAML format """
    params = get_summary(outcar)
    with open(outfile, "w") as f:
        yaml.dump(params, f, sort_keys=False)
    logger.info(" Output %s" % outfile)
