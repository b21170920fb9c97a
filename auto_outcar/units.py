#
# units.py
#
# Frequency units used when listing vibrational modes
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import math

pi = math.pi
clight = 2.99792458e8      # m/s
plank = 6.62607004e-34     # m2*kg/s
hbar = plank/2./pi         # m2*kg/s

## Energy
EvToJ = 1.60217662e-19       # J/eV
JToEv = 1./EvToJ             # eV/J

HzToJ = 2.*pi*hbar           # J/Hz

CmToHz  = clight * 100.      # Hz/cm^-1
CmToTHz = clight * 1e-10     # THz/cm^-1
CmToJ   = CmToHz * HzToJ     # J/cm^-1
CmToEv  = CmToJ  * JToEv     # eV/cm^-1
CmToMeV = CmToEv * 1e3       # meV/cm^-1
