import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="datamodel_to_graphql",
    version="1.0.0",
    description="Generate a typed Strawberry GraphQL API layer from a relational data model schema",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="graphql strawberry prisma code generation resolvers template",
    license="MIT",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "format": [
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "strawberry-graphql>=0.220.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "datamodel_to_graphql=datamodel_to_graphql.datamodel_to_graphql:datamodel_to_graphql",
        ],
    },
    include_package_data=True,
    package_data={
        "datamodel_to_graphql": ["templates/*.jinja2"],
    },
    zip_safe=False,
)
