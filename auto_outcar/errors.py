#
# errors.py
#
# Exceptions raised while reading OUTCAR/POSCAR files and while operating on
# the resulting structures and trajectories.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#

class OutcarError(ValueError):
    """ Base class of all errors raised by auto_outcar """
    pass

class FormatError(OutcarError):
    """ A required marker or section is missing, or has a wrong shape.

    Args
    -----
    msg : string
    field : string, optional
        Name of the field being extracted (e.g. "nions", "POSITION block").
    """
    def __init__(self, msg, field=None):
        self.field = field
        if field is not None:
            msg = "%s: %s" % (field, msg)
        super().__init__(msg)

class ParseError(OutcarError):
    """ A token which must be numeric or boolean cannot be converted """
    def __init__(self, msg, field=None, token=None):
        self.field = field
        self.token = token
        if token is not None:
            msg = "%s (token: '%s')" % (msg, token)
        if field is not None:
            msg = "%s: %s" % (field, msg)
        super().__init__(msg)

class ConsistencyError(OutcarError):
    """ Sequences that must have equal lengths disagree. """
    def __init__(self, msg, field=None, expected=None, actual=None):
        self.field = field
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            msg = "%s (expected %d, got %d)" % (msg, expected, actual)
        if field is not None:
            msg = "%s: %s" % (field, msg)
        super().__init__(msg)

class GeometryError(OutcarError):
    """ The cell is singular and cannot be inverted. """
    def __init__(self, msg, determinant=None):
        self.determinant = determinant
        if determinant is not None:
            msg = "%s (det = %.3e)" % (msg, determinant)
        super().__init__(msg)

class RangeError(OutcarError, IndexError):
    """ 1-based index out of range for an already loaded object. """
    def __init__(self, index, length, what="step"):
        self.index = index
        self.length = length
        msg = "%s index %d out of range (valid: 1..%d)" % (what, index, length)
        super().__init__(msg)
