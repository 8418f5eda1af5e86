from setuptools import setup, find_packages

long_description = """Closed-form magnetic field of multi-layer solenoids.

Fields of circular current loops are evaluated from complete elliptic
integrals and summed over every winding. Grids are solved in parallel with a
bounded worker pool."""

extras_require = dict(
                      develop=['line_profiler', 'pytest-xdist'],
                      test=['pytest', 'pytest-cov', 'pytest-xdist', 'asv'],
                      )

extras_require['full'] = [module for mode in extras_require for
                          module in extras_require[mode]]

setup_kwargs = dict(
    name                = 'coilfield',
    version             = '0.1.0',
    description         = 'Solenoid magnetic field tools',
    license             = 'BSD',
    keywords            = 'solenoid magnetic field Biot Savart elliptic integral',
    long_description    = long_description,
    packages            = find_packages(include=['coilfield', 'coilfield.*']),
    include_package_data= True,
    package_data        = {},
    classifiers         = [
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3.10',
        'Topic :: Scientific/Engineering :: Physics',
    ],
    python_requires     = '>=3.10',
    install_requires    = [
        'click',
        'numba',
        'numpy',
        'scipy',
        'tqdm',
        'xarray',
    ],
    extras_require     = extras_require,
    entry_points={'console_scripts': [
                      'coilfield = coilfield.scripts.cli:coilfield']},
)

setup(**setup_kwargs)
