from setuptools import setup, find_packages

setup(
    name="embed-bridge",
    version="0.1.0",
    description="Media-element bridge for the YouTube iframe player API",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"embed_bridge.common": ["default_config.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "pyzmq>=25.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
            "pylint>=2.17.0",
        ]
    },
)
