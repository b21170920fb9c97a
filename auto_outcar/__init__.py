from auto_outcar.version import __version__
from auto_outcar.cui.log import set_logging

output_files = {
        'xdatcar'  : 'XDATCAR',
        'poscar'   : 'POSCAR_{:05d}.vasp',     ## 1-based step index
        'xsf_step' : 'step_{:05d}.xsf',
        'xsf_mode' : 'mode_{:04d}.xsf',        ## 1-based mode index
        'summary'  : 'outcar.yaml',
        'split_a'  : 'POSCAR_A',
        'split_b'  : 'POSCAR_B',
        'converted': 'POSCAR_new',
        }

default_poscar_format = {
        'fractional'          : True,
        'preserve_constraints': True,
        'add_symbol_tags'     : True,
        }

### columns of the table of ionic steps
default_iterations_format = {
        'energy'    : False,    ## TOTEN
        'energyz'   : True,     ## energy(sigma->0)
        'log10de'   : True,
        'favg'      : False,
        'fmax'      : True,
        'fmax_axis' : False,
        'fmax_index': False,
        'nscf'      : True,
        'time'      : True,     ## [min]
        'magmom'    : True,
        'volume'    : False,
        }
