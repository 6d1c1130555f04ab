from setuptools import setup, find_packages

setup(
    name='target-capture',
    version='1.0.0',
    description='Shot group capture: target photo calibration and marksmanship group statistics',
    packages=find_packages(include=['target_capture', 'target_capture.*']),
    py_modules=['main'],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'matplotlib',
        'PyQt6',
    ],
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ],
    },
    entry_points={
        'gui_scripts': [
            'target-capture=main:main',
        ],
    },
)
