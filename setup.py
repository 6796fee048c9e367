from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="comingsoon",
    version="0.1.0",
    author="Laurence Stephan",
    description="A Flask coming soon landing page with an email capture API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: Flask",
    ],
    python_requires=">=3.9",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-SQLAlchemy>=3.1.0",
        "SQLAlchemy>=2.0",
        "Flask-CORS>=4.0.0",
        "MarkupSafe>=2.1",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "postgres": [
            "psycopg2-binary>=2.9",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-flask>=1.2",
            "black>=22.0",
            "flake8>=5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "comingsoon=comingsoon.server:main",
        ],
    },
    include_package_data=True,
    package_data={
        "comingsoon": [
            "static/*.html",
            "static/*.css",
            "static/*.js",
            "modules/*/templates/**/*.html",
        ],
    },
    zip_safe=False,
)
