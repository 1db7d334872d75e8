from glob import glob
from setuptools import setup


setup(
    name='rdpcalc',
    use_scm_version={
        'fallback_version': '0.1.0',
    },
    description='Recursive descent calculator',
    install_requires=[
        'regex',
        'prompt_toolkit',
        'numpy',
    ],
    packages=['rdpcalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.7',
    setup_requires=[
        'setuptools_scm',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
