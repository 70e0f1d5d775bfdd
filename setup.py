# This file is part of oci-vnic. See LICENSE file for license information.

import os
import sys
from glob import glob

import setuptools

# Python-path here is a little unpredictable as setup.py could be run
# from a directory other than the root of the repo, so ensure we can find
# our utils
sys.path.insert(0, os.path.dirname(os.path.realpath(__file__)))
# isort: off
from setup_utils import get_version, is_f, read_requires  # noqa: E402

# isort: on
del sys.path[0]

# Relative to the installation prefix, packagers move these into place
ETC = "etc"
USR_LIB = "lib"

data_files = [
    (ETC + "/oci-vnic", ["templates/profile.tpl", "config/oci-vnic.cfg"]),
    (USR_LIB + "/udev/rules.d", [f for f in glob("udev/*.rules") if is_f(f)]),
    (USR_LIB + "/systemd/system", [f for f in glob("systemd/*") if is_f(f)]),
]

setuptools.setup(
    name="oci-vnic",
    version=get_version(),
    description="Write network profiles for OCI vnics from instance metadata",
    license="Apache-2.0",
    python_requires=">=3.8",
    packages=setuptools.find_packages(exclude=["tests.*", "tests"]),
    data_files=data_files,
    install_requires=read_requires(),
    extras_require={"test": read_requires("test-requirements.txt")},
    entry_points={
        "console_scripts": [
            "oci-vnic = ocivnic.cmd.main:main",
        ],
    },
)
