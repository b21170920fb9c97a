import pytest

from auto_outcar.outlog import Outcar

HEADER = """ vasp.6.3.0 18Jan22 (build Feb 08 2022 10:06:52) complex
 executed on             LinuxIFC date 2022.03.17  22:09:31
 running on    1 total cores

 INCAR:
 POTCAR:    PAW_PBE H 15Jun2001
 POTCAR:    PAW_PBE N 08Apr2002
 POTCAR:    PAW_PBE H 15Jun2001
   VRHFIN =H: ultrasoft test
   LEXCH  = PE
   EATOM  =    12.4884 eV,    0.9179 Ry
   POMASS =    1.000; ZVAL   =    1.000    mass and valenz

 POTCAR:    PAW_PBE N 08Apr2002
   VRHFIN =N: s2p3
   LEXCH  = PE
   EATOM  =   264.5486 eV,   19.4438 Ry
   POMASS =   14.001; ZVAL   =    5.000    mass and valenz

 Dimension of arrays:
   k-points           NKPTS =      1   k-points in BZ     NKDIM =      1   number of bands    NBANDS=      8
   number of dos      NEDOS =    301   number of ions     NIONS =      4
   non local maximal  LDIM  =      4   non local SUM 2l+1 LMDIM =      8
   support grid    NGXF=    60 NGYF=   72 NGZF=   80
   ions per type =               3   1

   ICHARG =      2    charge: 1-file 2-atom 10-const
   ISPIN  =      1    spin polarized calculation?
   LNONCOLLINEAR =      F non collinear calculations
   LSORBIT =      F    spin-orbit coupling
   NSW    =     85    number of steps for IOM
   IBRION =      5    ionic relax: 0-MD 1-quasi-New 2-CG
   ISIF   =      2    stress and relaxation
   POMASS =   1.00 14.00

  energy-cutoff  :      400.00
  volume of cell :      336.00
      direct lattice vectors                 reciprocal lattice vectors
     6.000000000  0.000000000  0.000000000     0.166666667  0.000000000  0.000000000
     0.000000000  7.000000000  0.000000000     0.000000000  0.142857143  0.000000000
     0.000000000  0.000000000  8.000000000     0.000000000  0.000000000  0.125000000

"""

STEP = """----------------------------------------- Iteration    {istep:d}(   1)  ---------------------------------------
  free energy    TOTEN  =        51.95003235 eV
  energy without entropy =       51.93837380  energy(sigma->0) =       51.94614617
      LOOP:  cpu time    0.0894: real time    0.0949
 number of electron       8.0000000 magnetization {magmom}
----------------------------------------- Iteration    {istep:d}(  {nscf:d})  ---------------------------------------
  free energy    TOTEN  =       -22.11911831 eV
  energy without entropy =      -22.13071412  energy(sigma->0) =      -22.12298358
      LOOP:  cpu time    0.0275: real time    0.0261
 number of electron       8.0000000 magnetization {magmom}

 E-fermi :  -0.7865     XC(G=0):  -2.0223     alpha+bet : -0.5051

  FORCE on cell =-STRESS in cart. coord.  units (eV):
  in kB      -6.78636    -7.69902    -4.03340     0.00000     0.00000     0.00000
  external pressure =       {pressure} kB  Pullay stress =        0.00 kB

 VOLUME and BASIS-vectors are now :
 -----------------------------------------------------------------------------
  energy-cutoff  :      400.00
  volume of cell :      336.00
      direct lattice vectors                 reciprocal lattice vectors
     {a:.9f}  0.000000000  0.000000000     0.166666667  0.000000000  0.000000000
     0.000000000  7.000000000  0.000000000     0.000000000  0.142857143  0.000000000
     0.000000000  0.000000000  8.000000000     0.000000000  0.000000000  0.125000000

 POSITION                                       TOTAL-FORCE (eV/Angst)
 -----------------------------------------------------------------------------------
{posforce} -----------------------------------------------------------------------------------
    total drift:                                0.000000     -0.000260     -0.000000

  FREE ENERGIE OF THE ION-ELECTRON SYSTEM (eV)
  ---------------------------------------------------
  free  energy   TOTEN  =       {toten:.8f} eV

  energy  without entropy=      {toten_w:.8f}  energy(sigma->0) =      {toten_z:.8f}

     LOOP+:  cpu time    2.0921: real time    {cputime:.4f}

"""

POSFORCE = [
    """      3.87720      4.01520      4.00000        -0.438233     -0.328151      0.000000
      3.00000      2.48290      4.00000         0.000000      0.536218      0.000000
      2.12280      4.01520      4.00000         0.438233     -0.328151      0.000000
      3.00000      3.50000      4.00000         0.000000      0.120085      0.000000
""",
    """      3.89220      4.01520      4.00000        -0.930834     -0.563415      0.000000
      3.00000      2.48290      4.00000        -0.006828      0.527001      0.000000
      2.12280      4.01520      4.00000         0.458533     -0.304111      0.000000
      3.00000      3.50000      4.00000         0.479129      0.340525      0.000000
""",
    """      3.86220      4.01520      4.00000         0.089245     -0.065055      0.000000
      3.00000      2.48290      4.00000         0.007618      0.545925      0.000000
      2.12280      4.01520      4.00000         0.417195     -0.352508      0.000000
      3.00000      3.50000      4.00000        -0.514057     -0.128362      0.000000
""",
    ]

STEP_VALUES = [
    dict(nscf=23, pressure="-6.17", a=6.0, toten=-19.26550806,
         toten_w=-19.27710387, toten_z=-19.26937333, cputime=2.0863),
    dict(nscf=13, pressure="-7.03", a=6.0, toten=-19.25519593,
         toten_w=-19.26679174, toten_z=-19.25906120, cputime=1.1865),
    dict(nscf=13, pressure="-5.27", a=6.1, toten=-19.26817124,
         toten_w=-19.27976705, toten_z=-19.27203651, cputime=1.2670),
    ]

VIBRATIONS = """
 Degrees of freedom DOF   =           3

 Eigenvectors and eigenvalues of the dynamical matrix
 ----------------------------------------------------


   1 f  =  108.762876 THz   683.376811 2PiTHz 3627.910256 cm-1   449.806 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.500000   0.000000   0.000000
      3.000000  2.482900  4.000000     0.000000  -0.500000   0.000000
      2.122800  4.015200  4.000000    -0.500000   0.000000   0.000000
      3.000000  3.500000  4.000000     0.100000   0.200000   0.000000

   2 f  =  108.545928 THz   682.013706 2PiTHz 3620.673620 cm-1   448.909 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.000000   0.300000   0.000000
      3.000000  2.482900  4.000000     0.400000   0.000000   0.000000
      2.122800  4.015200  4.000000     0.000000  -0.300000   0.000000
      3.000000  3.500000  4.000000     0.000000   0.000000   0.200000

   3 f/i=    0.022552 THz     0.141700 2PiTHz    0.752260 cm-1     0.093 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.000000   0.000000   0.250000
      3.000000  2.482900  4.000000     0.000000   0.000000   0.250000
      2.122800  4.015200  4.000000     0.000000   0.000000   0.250000
      3.000000  3.500000  4.000000     0.000000   0.000000   0.935414


 Eigenvectors after division by SQRT(mass)

 Eigenvectors and eigenvalues of the dynamical matrix
 ----------------------------------------------------


   1 f  =  108.762876 THz   683.376811 2PiTHz 3627.910256 cm-1   449.806 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  2.482900  4.000000     0.999000   0.999000   0.999000
      2.122800  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  3.500000  4.000000     0.999000   0.999000   0.999000

   2 f  =  108.545928 THz   682.013706 2PiTHz 3620.673620 cm-1   448.909 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  2.482900  4.000000     0.999000   0.999000   0.999000
      2.122800  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  3.500000  4.000000     0.999000   0.999000   0.999000

   3 f/i=    0.022552 THz     0.141700 2PiTHz    0.752260 cm-1     0.093 meV
             X         Y         Z           dx          dy          dz
      3.877200  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  2.482900  4.000000     0.999000   0.999000   0.999000
      2.122800  4.015200  4.000000     0.999000   0.999000   0.999000
      3.000000  3.500000  4.000000     0.999000   0.999000   0.999000

"""

## raw displacements of the first set of eigenvectors
RAW_MODES = [
    [[0.5, 0.0, 0.0], [0.0, -0.5, 0.0], [-0.5, 0.0, 0.0], [0.1, 0.2, 0.0]],
    [[0.0, 0.3, 0.0], [0.4, 0.0, 0.0], [0.0, -0.3, 0.0], [0.0, 0.0, 0.2]],
    [[0.0, 0.0, 0.25], [0.0, 0.0, 0.25], [0.0, 0.0, 0.25], [0.0, 0.0, 0.935414]],
    ]

ION_MASSES = [1.0, 1.0, 1.0, 14.001]

def make_outcar_text(magmom="", vibrations=False, nsteps=3):
    text = HEADER
    for istep in range(nsteps):
        text += STEP.format(istep=istep + 1, magmom=magmom,
                            posforce=POSFORCE[istep], **STEP_VALUES[istep])
    if vibrations:
        text += VIBRATIONS
    return text

@pytest.fixture
def relax_text():
    """ Three ionic steps of a non-magnetic run """
    return make_outcar_text()

@pytest.fixture
def magnetic_text():
    return make_outcar_text(magmom="      2.0000000")

@pytest.fixture
def vib_text():
    return make_outcar_text(vibrations=True)

@pytest.fixture
def outcar(relax_text):
    return Outcar(relax_text)

@pytest.fixture
def vib_outcar(vib_text):
    return Outcar(vib_text)

POSCAR_HN = """H3N molecule
   1.00000000000000
     6.0000000000000000    0.0000000000000000    0.0000000000000000
     0.0000000000000000    7.0000000000000000    0.0000000000000000
     0.0000000000000000    0.0000000000000000    8.0000000000000000
   H    N
     3     1
Selective dynamics
Direct
  0.6462000000000000  0.5736000000000000  0.5000000000000000   T   T   F
  0.5000000000000000  0.3547000000000000  0.5000000000000000   F   F   F
  0.3538000000000000  0.5736000000000000  0.5000000000000000   T   T   F
  0.5000000000000000  0.5000000000000000  0.5000000000000000   F   F   F
"""

POSCAR_SI = """Si5 chain
   2.0
     2.5  0.0  0.0
     0.0  2.5  0.0
     0.0  0.0  5.0
   Si
     5
Cartesian
  0.00  0.00  0.40
  0.50  0.10  0.30
  1.00  0.20  0.20
  1.50  0.30  0.10
  2.00  0.40  0.00
"""

@pytest.fixture
def poscar_hn():
    return POSCAR_HN

@pytest.fixture
def poscar_si():
    return POSCAR_SI
