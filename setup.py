#!/usr/bin/python3
# ******************************************************************************
# Copyright (c) 2022 Huawei Technologies Co., Ltd.
# perf2profile is licensed under Mulan PSL v2.
# You can use this software according to the terms and conditions of the Mulan PSL v2.
# You may obtain a copy of Mulan PSL v2 at:
#          http://license.coscl.org.cn/MulanPSL2
# THIS SOFTWARE IS PROVIDED ON AN "AS IS" BASIS, WITHOUT WARRANTIES OF ANY KIND,
# EITHER EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO NON-INFRINGEMENT,
# MERCHANTABILITY OR FIT FOR A PARTICULAR PURPOSE.
# See the Mulan PSL v2 for more details.
# ******************************************************************************/

from glob import glob

from setuptools import setup, find_packages

setup(
    name="perf2profile",
    version="1.0.0",
    description="Convert perf.data captures and PerfDataProto streams into pprof profiles",
    keywords=["perf", "pprof", "profiling"],
    packages=find_packages(where=".", include=("perf2profile", "perf2profile.*")),
    python_requires=">=3.8",
    data_files=[
        ('/etc/perf2profile/', glob('config/convert_config.json')),
    ],
    install_requires=[
        "protobuf>=4.25",
        "construct>=2.10",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "perf2profile=perf2profile.main:main",
        ]
    }
)
