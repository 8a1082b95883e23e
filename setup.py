import setuptools
from setuptools import setup

import SATVIEW


#### Get/Set info to be passed into setup() ####
with open("README.md", "r") as fh:
    long_description = fh.read()

with open("requirements.txt") as reqFile:
    install_reqs = [ line.strip() for line in reqFile.readlines() if line.strip() != "" and not line.strip().startswith("#") ]

setup(
    name='SATVIEW',
    version=SATVIEW.__version__,
    description="Satellite attitude dynamics integration and 3D playback of attitude trajectories",
    install_requires=install_reqs,
    extras_require={
        'test': [ 'pytest' ]
    },
    license='MIT',
    long_description = long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=[ "test", "test.*", ]),
    package_data={
        'SATVIEW': [ 'Examples/Simulations/*.satview', 'Examples/Traces/*.csv' ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Education",
        "Natural Language :: English",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    include_package_data=True,

    python_requires='>=3.8',

    zip_safe=False,

    entry_points={
        'console_scripts': [
            'satview = SATVIEW.Main:main' ]
    }
)
