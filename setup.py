"""Install the accounts service."""

from setuptools import setup, find_packages

setup(
    name='accounts-service',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    package_data={'accounts': ['config.py']},
    python_requires='>=3.8',
    install_requires=[
        "bcrypt",
        "click",
        "email-validator>=2.0",
        "fakeredis",
        "flask",
        "flask-sqlalchemy>=3.0",
        "pyjwt>=2.0",
        "python-json-logger",
        "pytz",
        "redis",
        "sqlalchemy>=1.4",
    ],
    extras_require={
        'test': [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': ['accounts=accounts.cli:cli'],
    },
    zip_safe=False
)
