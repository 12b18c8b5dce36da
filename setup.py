from setuptools import setup

# Version
version = None
with open("codatools/__init__.py", "r") as f:
    for line in f.readlines():
        line = line.strip()
        if line.startswith("__version__"):
            version = line.split("=")[-1].strip().strip('"')
assert version is not None, "Check version in codatools/__init__.py"

setup(
name='codatools',
    version=version,
    description='Log-ratio coordinates, induced norms and distances for compositional data analysis in Python',
    author='CoDaTools contributors',
    license='BSD-3',
    packages=["codatools"],
    python_requires=">=3.8",
    install_requires=[
        "pandas",
        "numpy",
        "scipy",
      ],
    extras_require={
        "test": ["pytest"],
      },
)
