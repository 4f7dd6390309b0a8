"""
Packaging for agentlink. Tests live beside the code as *_test.py and run with
`pip install -e .[test]` followed by `pytest src`.
"""

from setuptools import setup


setup(
    name='agentlink-client-py',
    version='0.1.0',
    description='Coordinates a host application with a local board-programming agent: '
                'connectivity, device discovery, uploads and downloads.',
    url='',
    author='',
    author_email='',
    license='GPLv3',
    package_dir={'': 'src'},
    packages=['agentlink', 'agentlink.config', 'agentlink.support'],
    package_data={'agentlink.config': ['*.cfg']},
    python_requires='>=3.6',
    install_requires=[
        'configobj>=5.0.6',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest',
            'timeout-decorator',
        ]
    },
    zip_safe=False,
)
