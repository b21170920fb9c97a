#
# log.py
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import datetime

import logging
logger = logging.getLogger(__name__)

def set_logging(
        filename='log.txt',
        level=logging.DEBUG,
        format=" %(levelname)8s : %(message)s"
        ):
    """ Output log messages to ``filename`` and the standard error. If
    ``filename`` is None, only the stream handler is installed. """
    handlers = []

    ### file handler
    if filename is not None:
        fh = logging.FileHandler(filename=filename, mode='w')
        fh.setFormatter(logging.Formatter(format))
        handlers.append(fh)

    ### stream handler
    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter(format))
    handlers.append(sh)

    logging.basicConfig(level=level, handlers=handlers)

def start_autooutcar():
    from auto_outcar.version import __version__
    time = datetime.datetime.now()
    msg = "\n"
    msg += " auto-outcar ver. %s\n" % __version__
    msg += " Start at " + time.strftime("%m/%d/%Y %H:%M:%S") + "\n"
    logger.info(msg)

def print_species_info(structure):
    """ Output the species and their counts of a Structure """
    msg = "\n"
    msg += " Species : " + " ".join("%5s" % s for s in structure.species) + "\n"
    msg += " Counts  : " + " ".join("%5d" % n for n in structure.counts) + "\n"
    msg += " Natoms  : %d\n" % structure.natoms
    logger.info(msg)

def print_outcar_info(outcar):
    """ Output the global values of an Outcar """
    msg = "\n"
    msg += " File    : %s\n" % outcar.filename
    msg += " ISPIN   : %d\n" % outcar.ispin
    msg += " LSORBIT : %s\n" % ("T" if outcar.lsorbit else "F")
    msg += " IBRION  : %d\n" % outcar.ibrion
    msg += " NIONS   : %d\n" % outcar.nions
    msg += " NKPTS   : %d\n" % outcar.nkpts
    msg += " NBANDS  : %d\n" % outcar.nbands
    msg += " E-fermi : %.4f eV\n" % outcar.efermi
    msg += " Species : " + " ".join(
        "%s%d" % (s, n) for s, n in zip(outcar.ion_types, outcar.ions_per_type)) + "\n"
    msg += " Steps   : %d\n" % len(outcar.ion_iters)
    if outcar.vib is not None:
        msg += " Modes   : %d\n" % len(outcar.vib)
    logger.info(msg)
