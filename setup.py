from setuptools import setup, find_packages

setup(
    name='introns-fill',
    version='0.3.0',
    packages=find_packages('.', exclude=["tests", "tests.*", "validation.tests"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    license='MIT',
    description='GenBank flat file loader for the exon/intron structure database',
    zip_safe=False,
    keywords="genbank refseq gene isoform exon intron splice phase database",
    python_requires=">=3.8",
    install_requires=[
        "biopython>=1.78",
        "pyfaidx>=0.5.8",
        "jsonschema>=3.2.0",
        "pyyaml>=5.4.1",
        "sqlalchemy>=1.4",
    ],
    extras_require={
        'mysql': [
            'pymysql',
        ],
        'dev': [
            'pytest',
        ],
    },
    package_data={
        "validation": ["metadata.schema.json"],
    },
    entry_points={
        "console_scripts": [
            "introns-fill=introns.__main__:main"
        ]
    }
)
