import logging
import numpy as np
from numpy.testing import assert_allclose
import pytest

from auto_outcar.errors import FormatError, ConsistencyError
from auto_outcar.outlog import Outcar
from auto_outcar.outlog.core import extract_fields

from conftest import make_outcar_text, POSCAR_HN

def test_global_values(outcar):
    assert outcar.ispin == 1
    assert outcar.lsorbit is False
    assert outcar.ibrion == 5
    assert outcar.nions == 4
    assert (outcar.nkpts, outcar.nbands) == (1, 8)
    assert outcar.efermi == -0.7865
    assert_allclose(outcar.cell, np.diag([6., 7., 8.]))
    assert outcar.ions_per_type == [3, 1]
    assert outcar.ion_types == ["H", "N"]
    assert outcar.symbols == ["H", "H", "H", "N"]
    assert_allclose(outcar.ion_masses, [1., 1., 1., 14.001])
    assert outcar.vib is None
    assert outcar.constraints is None

def test_ionic_steps(outcar):
    iters = outcar.ion_iters
    assert len(iters) == outcar.nsteps == 3
    assert [it.nscf for it in iters] == [23, 13, 13]
    assert [it.toten for it in iters] == [-19.26550806, -19.25519593, -19.26817124]
    assert [it.toten_z for it in iters] == [-19.26937333, -19.25906120, -19.27203651]
    assert [it.cputime for it in iters] == [2.0863, 1.1865, 1.2670]
    assert [it.pressure for it in iters] == [-6.17, -7.03, -5.27]
    assert [it.magmom for it in iters] == [None, None, None]
    assert_allclose(iters[0].positions[0], [3.87720, 4.01520, 4.00000])
    assert_allclose(iters[0].forces[0], [-0.438233, -0.328151, 0.0])
    assert_allclose(iters[2].cell, np.diag([6.1, 7., 8.]))

def test_records_are_read_only(outcar):
    with pytest.raises(ValueError):
        outcar.ion_iters[0].positions[0, 0] = 0.

def test_magnetic(magnetic_text):
    outcar = Outcar(magnetic_text, nprocs=2)
    assert [it.magmom for it in outcar.ion_iters] == [[2.0], [2.0], [2.0]]

def test_serial_and_parallel_extraction_agree(relax_text):
    serial = extract_fields(relax_text, nprocs=1)
    parallel = extract_fields(relax_text)
    assert serial.keys() == parallel.keys()
    assert serial['toten'] == parallel['toten']
    assert serial['nscf'] == parallel['nscf']

@pytest.mark.parametrize("marker, field", [
    ("     LOOP+:", "cputime"),
    (" POSITION  ", "positions"),
    ("direct lattice vectors", "cells"),
    ("external pressure", "pressure"),
    ])
def test_inconsistent_step_count(relax_text, marker, field):
    ## break the last occurrence of a per-step line
    idx = relax_text.rindex(marker)
    text = relax_text[:idx] + "XXX" + relax_text[idx + len(marker):]
    with pytest.raises(ConsistencyError) as e:
        Outcar(text)
    assert e.value.field == field
    assert (e.value.expected, e.value.actual) == (3, 2)

def test_wrong_number_of_atoms(relax_text):
    text = relax_text.replace("ions per type =               3   1",
                              "ions per type =               3   2")
    with pytest.raises(ConsistencyError):
        Outcar(text)

def test_missing_global_marker(relax_text):
    text = relax_text.replace("ISPIN", "ISPN")
    with pytest.raises(FormatError) as e:
        Outcar(text)
    assert e.value.field == "ispin"

def test_from_file(tmp_path, relax_text, caplog):
    fn = tmp_path / "OUTCAR"
    fn.write_text(relax_text)
    with caplog.at_level(logging.INFO):
        outcar = Outcar.from_file(str(fn))
    assert outcar.filename == str(fn)
    assert "Parsing" in caplog.text
    assert "H3 N1" in repr(outcar)

def test_set_constraints(outcar):
    flags = [[True, True, False], [False, False, False],
             [True, True, False], [False, False, False]]
    outcar.set_constraints(flags)
    assert outcar.constraints.tolist() == flags
    with pytest.raises(ConsistencyError):
        outcar.set_constraints(flags[:2])
    outcar.set_constraints(None)
    assert outcar.constraints is None

def test_set_constraints_from_files(tmp_path, outcar, caplog):
    fn = tmp_path / "POSCAR"
    fn.write_text(POSCAR_HN)
    missing = str(tmp_path / "CONTCAR")
    used = outcar.set_constraints_from_files([missing, str(fn)])
    assert used == str(fn)
    assert outcar.constraints[0].tolist() == [True, True, False]

def test_set_constraints_from_unreadable_files(tmp_path, outcar, caplog):
    with caplog.at_level(logging.WARNING):
        used = outcar.set_constraints_from_files([str(tmp_path / "POSCAR")])
    assert used is None
    assert outcar.constraints is None
    assert "Constraints cannot be read" in caplog.text

def test_save_ionic_step_as_xsf(tmp_path, outcar):
    fn = outcar.save_ionic_step_as_xsf(2, str(tmp_path))
    lines = open(fn).read().splitlines()
    assert lines[0] == "CRYSTAL"
    assert lines[6].split() == ["4", "1"]
    values = [float(v) for v in lines[7].split()[1:]]
    assert_allclose(values, [3.89220, 4.01520, 4.0, -0.930834, -0.563415, 0.0])

def test_vibrational_run(vib_outcar):
    assert vib_outcar.nsteps == 3
    assert len(vib_outcar.vib) == 3

def test_partial_text_gives_no_object():
    text = make_outcar_text(nsteps=2)
    outcar = Outcar(text)
    assert outcar.nsteps == 2
    with pytest.raises(FormatError):
        Outcar(text[:len(text) // 10])
