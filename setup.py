#!/usr/bin/env python
"""Installation script for hbtune."""
import os

from setuptools import setup

repo_root = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(repo_root, "tests", "requirements.txt")) as f:
    tests_require = f.readlines()

packages = [  # Packages must be sorted alphabetically to ease maintenance and merges.
    "hbtune",
    "hbtune.algo",
    "hbtune.algo.hyperband",
    "hbtune.core",
    "hbtune.core.cli",
    "hbtune.core.io",
    "hbtune.core.utils",
    "hbtune.core.worker",
    "hbtune.executor",
    "hbtune.testing",
]

extras_require = {
    "test": tests_require,
}
extras_require["all"] = sorted(set(sum(extras_require.values(), [])))

setup_args = dict(
    name="hbtune",
    version="0.1.0",
    description="Hyperband budget-allocation scheduler",
    long_description=open(
        os.path.join(repo_root, "README.rst"), encoding="utf8"
    ).read(),
    license="BSD-3-Clause",
    author="hbtune developers",
    packages=packages,
    package_dir={"": "src"},
    include_package_data=True,
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "hbtune = hbtune.core.cli:main",
        ],
    },
    install_requires=[
        "PyYAML",
        "numpy",
        "scipy",
        "tabulate",
        "AppDirs",
        "pandas",
        "joblib",
    ],
    tests_require=tests_require,
    setup_requires=["setuptools"],
    extras_require=extras_require,
    zip_safe=False,
)

setup_args["keywords"] = [
    "Machine Learning",
    "Hyperparameter Optimization",
    "Hyperband",
    "Multi-armed Bandit",
]

setup_args["platforms"] = ["Linux"]

setup_args["classifiers"] = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "License :: OSI Approved :: BSD License",
    "Operating System :: POSIX",
    "Operating System :: Unix",
    "Programming Language :: Python",
    "Topic :: Scientific/Engineering",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
] + [("Programming Language :: Python :: %s" % x) for x in "3 3.8 3.9 3.10".split()]

if __name__ == "__main__":
    setup(**setup_args)
