from setuptools import setup

setup(
    name='contactsheet',
    version='0.1.0',
    description='Video contact sheet generator',
    license='Apache 2.0',
    packages=['contactsheet'],
    install_requires=['numpy', 'opencv-python-headless', 'attrs', 'pyyaml', 'tqdm'],
    tests_require=['pytest'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['contactsheet=contactsheet.cli:main']},
    zip_safe=False)
