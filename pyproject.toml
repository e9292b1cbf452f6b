[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sigtools"
version = "1.0.0"
description = "Analysis of sampled multi-channel signals: spectra, sliding FFT, peak tracking, test signals and PNG comment handling"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "signal",
    "fft",
    "spectrum",
    "sliding fft",
    "peak detection",
    "test signal",
    "pnm",
    "png",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sig_pnmtopng = "sigtools.pngcomments:main_pnmtopng"
sig_pnginfo = "sigtools.pngcomments:main_pnginfo"
testsig_decay = "sigtools.testsig:main_decay"
testsig_2decay = "sigtools.testsig:main_two_decay"
testsig_noise = "sigtools.testsig:main_noise"

[tool.hatch.build.targets.wheel]
packages = ["sigtools"]

[tool.hatch.build.targets.sdist]
include = [
    "sigtools",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
