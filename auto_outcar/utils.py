#
# utils.py
#
# This script contains utility functions
#
# Copyright (c) 2025 Masato Ohnishi
#
# This file is distributed under the terms of the MIT license.
# Please see the file 'LICENCE.txt' in the root directory
# or http://opensource.org/licenses/mit-license.php for information.
#
from auto_outcar.errors import OutcarError, RangeError

import logging
logger = logging.getLogger(__name__)

def index_transform(indices, length):
    """ Convert 1-based indices, which may be negative, to positive 1-based
    indices.

    Args:
    indices (list of int): -1 means the last element. If 0 is contained,
        all the indices (1, 2, ..., length) are returned.
    length (int): number of selectable elements

    Returns:
    list of int

    Raises:
    RangeError: a negative index points before the first element

    How to use
    ----------
    >>> index_transform([-2, -1, 1], 5)
    [4, 5, 1]
    >>> index_transform([0], 3)
    [1, 2, 3]
    """
    indices = list(indices)
    if 0 in indices:
        return list(range(1, length + 1))
    out = []
    for i in indices:
        if i < -length:
            raise RangeError(i, length, what="selected")
        if i < 0:
            out.append(i + length + 1)
        else:
            out.append(i)
    return out

def first_success(loaders, errors=(OutcarError, OSError)):
    """ Call each loader in order and return the first result.

    Args:
    loaders (list of (label, callable)): each callable takes no argument.
    errors (tuple): exceptions regarded as a failure of a loader

    Returns:
    tuple: (label, result) of the first loader that succeeded

    Raises:
    The exception of the last loader if all of them failed, or ValueError if
    ``loaders`` is empty.
    """
    last_error = None
    for label, loader in loaders:
        try:
            return label, loader()
        except errors as e:
            logger.debug(" Loader '%s' failed: %s" % (label, e))
            last_error = e
    if last_error is None:
        raise ValueError("No loader was given.")
    raise last_error
