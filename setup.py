from setuptools import setup

# Flat layout: every top-level module ships as-is
public_id_modules = [
    'config',
    'core_logic',
    'base62',
    'encoding',
    'segments',
    'models',
    'dispatcher',
    'registry',
    'dependencies',
]

setup(
    name='prefixed-public-ids',
    version='1.0',
    description='Prefixed, reversible public identifiers for integer and UUID primary keys.',
    py_modules=public_id_modules,
    python_requires='>=3.9',
    install_requires=[
        'hashids>=1.3',
        'pydantic>=2.0',
        'fastapi>=0.100',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
)
