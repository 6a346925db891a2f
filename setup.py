from setuptools import setup, find_packages

setup(
    name="fluxspan",
    version="0.1.0",
    description="Flux balance and flux variability analysis for metabolic networks",
    long_description=("Translates metabolic network models into linear programs and performs flux balance "
                      "analysis (FBA) and parallel flux variability analysis (FVA) with GLPK, HiGHS or SoPlex"),
    long_description_content_type="text/plain",
    license="Apache License 2.0",
    python_requires=">=3.8",
    packages=find_packages(include=["fluxspan", "fluxspan.*"]),
    install_requires=["cobra", "optlang", "numpy", "scipy", "pandas", "swiglpk"],
    extras_require={
        "scip": ["pyscipopt"],
        "tests": ["pytest", "pytest-timeout"],
    },
    classifiers=[
        "Intended Audience :: Science/Research", "Development Status :: 3 - Alpha", "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10", "Programming Language :: Python :: 3.11", "Programming Language :: Python :: 3.12",
        "Natural Language :: English", "Operating System :: OS Independent", "Topic :: Scientific/Engineering :: Bio-Informatics"
    ],
    keywords=["metabolism", "constraint-based", "flux balance analysis", "flux variability analysis"],
    zip_safe=False,
)
