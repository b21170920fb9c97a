from auto_outcar.structure.structure import Structure
from auto_outcar.structure.cell import (
    determinant,
    inverse,
    transpose,
    batch_transform,
    volume,
    fractional_to_cartesian,
    cartesian_to_fractional,
    )
from auto_outcar.structure.utils import change_structure_format
