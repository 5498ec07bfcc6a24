from setuptools import find_packages, setup

setup(
    name='sui-scenario-harness',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',

    entry_points={
        'console_scripts': [
            'sui-harness=sui_harness.__main__:main',
        ],
    },
    install_requires=[
        'base58',
        'click',
        'eth-utils',
        'gevent',
        'marshmallow>=3.13',
        'pynacl',
        'pyyaml',
        'requests',
        'structlog>=21.3',
    ],
    extras_require={
        'test': [
            'pytest',
            'responses',
        ],
    },
)
