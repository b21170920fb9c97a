import os
import numpy as np
from numpy.testing import assert_allclose
import pytest

from auto_outcar.errors import RangeError, FormatError
from auto_outcar.io.poscar import PoscarFormat, read_poscar
from auto_outcar.trajectory import Trajectory, Vibrations

from conftest import RAW_MODES, ION_MASSES

def test_from_outcar(outcar):
    traj = Trajectory.from_outcar(outcar)
    assert len(traj) == 3
    st = traj.structure(1)
    assert st.species_counts == [("H", 3), ("N", 1)]
    assert_allclose(st.fractional[0], [3.8772 / 6., 4.0152 / 7., 0.5])
    assert_allclose(traj.structure(3).cell, np.diag([6.1, 7., 8.]))
    assert_allclose(traj.forces(2)[0], [-0.930834, -0.563415, 0.])

@pytest.mark.parametrize("index", [0, 4, -1])
def test_step_out_of_range(outcar, index):
    traj = Trajectory.from_outcar(outcar)
    with pytest.raises(RangeError) as e:
        traj.structure(index)
    assert "valid: 1..3" in str(e.value)

def test_select_from_empty_trajectory(tmp_path):
    traj = Trajectory([], [])
    with pytest.raises(RangeError):
        traj.save_as_poscars([-1], str(tmp_path))
    with pytest.raises(RangeError):
        traj.save_as_xsfs([-1], str(tmp_path))

def test_save_as_xdatcar(tmp_path, outcar):
    traj = Trajectory.from_outcar(outcar)
    fn = traj.save_as_xdatcar(str(tmp_path))
    assert os.path.basename(fn) == "XDATCAR"
    lines = open(fn).read().splitlines()
    assert lines[5].split() == ["H", "N"]
    assert lines[6].split() == ["3", "1"]
    assert lines[7] == "Direct configuration=     1"
    assert lines[12] == "Direct configuration=     2"
    assert lines[17] == "Direct configuration=     3"
    assert len(lines) == 22
    assert_allclose([float(v) for v in lines[18].split()],
                    [3.8622 / 6.1, 4.0152 / 7., 0.5], atol=1e-8)

def test_save_as_poscars(tmp_path, outcar):
    outcar.set_constraints([[True, True, False], [False, False, False],
                            [True, True, False], [False, False, False]])
    traj = Trajectory.from_outcar(outcar)
    filenames = traj.save_as_poscars([-1, 1], str(tmp_path), nprocs=2)
    assert [os.path.basename(fn) for fn in filenames] == [
        "POSCAR_00003.vasp", "POSCAR_00001.vasp"]

    st = read_poscar(filenames[0])
    assert_allclose(st.cartesian, outcar.ion_iters[2].positions, atol=1e-10)
    assert st.constraints[0].tolist() == [True, True, False]

def test_save_as_poscar_cartesian_without_constraints(tmp_path, outcar):
    outcar.set_constraints([[False, False, False]] * 4)
    traj = Trajectory.from_outcar(outcar)
    fmt = PoscarFormat(fractional=False, preserve_constraints=False)
    fn = traj.save_as_poscar(2, str(tmp_path), fmt=fmt)
    text = open(fn).read()
    assert "Cartesian" in text
    assert "Selective dynamics" not in text

def test_save_all_steps(tmp_path, outcar):
    traj = Trajectory.from_outcar(outcar)
    assert len(traj.save_as_xsfs([0], str(tmp_path))) == 3
    with pytest.raises(RangeError):
        traj.save_as_poscars([5], str(tmp_path))

def test_vibrations(tmp_path, vib_outcar):
    vibs = Vibrations.from_outcar(vib_outcar)
    assert len(vibs) == 3
    assert vibs.mode(3).is_imaginary
    with pytest.raises(RangeError):
        vibs.mode(4)

    filenames = vibs.save_as_xsfs([0], str(tmp_path))
    assert [os.path.basename(fn) for fn in filenames] == [
        "mode_0001.xsf", "mode_0002.xsf", "mode_0003.xsf"]
    lines = open(filenames[0]).read().splitlines()
    assert lines[10].split()[0] == "N"
    values = [float(v) for v in lines[10].split()[1:]]
    expected = np.asarray(RAW_MODES[0][3]) / np.sqrt(ION_MASSES[3])
    assert_allclose(values[:3], [3.0, 3.5, 4.0])
    assert_allclose(values[3:], expected, atol=1e-9)

def test_no_vibrations(outcar):
    with pytest.raises(FormatError):
        Vibrations.from_outcar(outcar)
