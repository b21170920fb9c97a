#
# cell.py
#
# Closed-form algebra of 3x3 lattice matrices. Rows are lattice vectors.
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
import numpy as np

from auto_outcar.errors import GeometryError, FormatError

## |det| below this value is regarded as a degenerate lattice
DET_TOLERANCE = 1e-5

def _as_cell(cell):
    cell = np.asarray(cell, dtype=float)
    if cell.shape != (3, 3):
        raise FormatError("cell must be a 3x3 matrix, got shape %s" % (cell.shape,),
                          field="cell")
    return cell

def determinant(cell):
    """ Determinant of a 3x3 matrix by cofactor expansion along the first row """
    c = _as_cell(cell)
    return float(
        c[0,0] * (c[1,1] * c[2,2] - c[2,1] * c[1,2]) -
        c[0,1] * (c[1,0] * c[2,2] - c[1,2] * c[2,0]) +
        c[0,2] * (c[1,0] * c[2,1] - c[1,1] * c[2,0]))

def inverse(cell):
    """ Inverse of a 3x3 matrix with the adjugate formula.

    Return
    -------
    ndarray, shape=(3,3), or None if |det| < DET_TOLERANCE
    """
    c = _as_cell(cell)
    det = determinant(c)
    if abs(det) < DET_TOLERANCE:
        return None

    adj = np.zeros((3, 3))
    adj[0,0] =   c[1,1] * c[2,2] - c[1,2] * c[2,1]
    adj[0,1] = -(c[0,1] * c[2,2] - c[0,2] * c[2,1])
    adj[0,2] =   c[0,1] * c[1,2] - c[0,2] * c[1,1]
    adj[1,0] = -(c[1,0] * c[2,2] - c[1,2] * c[2,0])
    adj[1,1] =   c[0,0] * c[2,2] - c[0,2] * c[2,0]
    adj[1,2] = -(c[0,0] * c[1,2] - c[0,2] * c[1,0])
    adj[2,0] =   c[1,0] * c[2,1] - c[1,1] * c[2,0]
    adj[2,1] = -(c[0,0] * c[2,1] - c[0,1] * c[2,0])
    adj[2,2] =   c[0,0] * c[1,1] - c[0,1] * c[1,0]
    return adj / det

def transpose(cell):
    return _as_cell(cell).T.copy()

def batch_transform(points, matrix):
    """ Row-wise product ``points[i] @ matrix``.

    Args
    -----
    points : array-like, shape=(N, 3)
    matrix : array-like, shape=(3, 3)

    Return
    -------
    ndarray, shape=(N, 3), a new array
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    return pts @ _as_cell(matrix)

def volume(cell):
    return abs(determinant(cell))

def fractional_to_cartesian(fractional, cell):
    """ r = f @ cell """
    return batch_transform(fractional, cell)

def cartesian_to_fractional(cartesian, cell):
    """ f = r @ cell^-1

    Raises
    -------
    GeometryError : the cell is singular
    """
    inv = inverse(cell)
    if inv is None:
        raise GeometryError("Singular cell, cannot convert to fractional coordinates",
                            determinant=determinant(cell))
    return batch_transform(cartesian, inv)
