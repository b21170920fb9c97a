from auto_outcar.io.poscar import (
    PoscarFormat, parse_poscar, read_poscar, format_poscar, write_poscar, split_poscar,
    convert_poscar
    )
from auto_outcar.io.xdatcar import format_xdatcar, write_xdatcar
from auto_outcar.io.xsf import format_xsf, write_xsf
