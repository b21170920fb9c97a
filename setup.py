import pathlib
from setuptools import setup, find_packages

def _get_version():

    filename = "./auto_outcar/version.py"

    try:
        lines = open(filename, 'r').readlines()
        for line in lines:
            if '__version__' in line:
                line = line.translate(str.maketrans(
                    {"\"": " ", "\'": " ", "=": " "}
                    ))
                break
        data = line.split()
        return data[-1]

    except (OSError, IndexError, NameError):
        return "x.x"

def main(build_dir):

    version = _get_version()

    setup(
            name='auto_outcar',
            version=version,
            description='extraction of structures and trajectories from VASP OUTCAR and POSCAR',
            author='Masato Ohnishi',
            author_email='masato.ohnishi.ac@gmail.com',
            packages=find_packages(exclude=['tests', 'tests.*']),
            include_package_data=True,
            python_requires='>=3.8',
            install_requires=['numpy', 'ase', 'pymatgen', 'PyYAML'],
            extras_require={'test': ['pytest']},
            license='MIT',
            provides=['auto_outcar'],
            )

if __name__ == "__main__":

    build_dir = pathlib.Path.cwd() / "_build"

    main(build_dir)
