"""
Install skewcausal
"""
import pathlib
from setuptools import setup

long_description = pathlib.Path(__file__).parent.joinpath(
    "README.md").read_text(encoding="utf-8")

# Define the minimal classes needed to install and run skewcausal
INSTALL_REQUIRES = ["numpy>=1.18", "scipy>=1.10.0", "joblib>=1.2.0"]
# Define all the possible extras needed
EXTRAS_REQUIRE = {
    "all": [],
}

# Define the packages needed for testing
TESTS_REQUIRE = ["pytest"]
EXTRAS_REQUIRE["test"] = TESTS_REQUIRE
# Define the extras needed for development
EXTRAS_REQUIRE["dev"] = EXTRAS_REQUIRE["all"] + TESTS_REQUIRE

# Run the setup
setup(
    name="skewcausal",
    version="0.1.0",
    packages=["skewcausal", "skewcausal.independence_tests"],
    license="GNU General Public License v3.0",
    description="Skew-based causal discovery with feedback candidates",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="causal inference, causal discovery, non-Gaussian, feedback",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    test_suite="tests",
    tests_require=TESTS_REQUIRE,
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License "
        ":: OSI Approved "
        ":: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python",
    ],
)
