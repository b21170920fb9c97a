#
# __init__.py
#
# Extraction of the information in OUTCAR
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
from auto_outcar.outlog.core import Outcar
from auto_outcar.outlog.records import IonicIteration, VibrationalMode
