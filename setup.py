import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="static_infer",
    version="0.1.0",
    description="Infer JSON values and JSON Schemas from TypeScript/JavaScript source without executing it",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Software Development :: Testing :: Mocking",
        "Intended Audience :: Developers",
    ],
    keywords="typescript static analysis json schema zod mock tree-sitter",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.12",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "tree-sitter>=0.22.0",
        "tree-sitter-typescript>=0.21.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "static_infer=static_infer.static_infer:cli",
        ],
    },
    include_package_data=True,
    package_data={
        "static_infer": ["templates/*.jinja2"],
    },
    zip_safe=False,
)
