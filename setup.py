from setuptools import setup, find_packages

with open("Readme.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="watchman-service-inventory",
    version="1.0.0",
    author="Watchman",
    author_email="support@watchman.bj",
    description='Inventaire ponctuel des services systemd : fichier unité, Type, ExecStart, Description, User.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    include_package_data=True,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.8',
    install_requires=[
        "psutil>=5.9.0",
        "configparser>=5.3.0",
    ],
    extras_require={
        "dbus": [
            "dbus-python>=1.3.2",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },

    entry_points='''
        [console_scripts]
        watchman-service-inventory=service_inventory.main:main
    '''
)
