"""Setup script for the syllabus deadline tracker."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="syllabus-deadline-tracker",
    version="0.1.0",
    author="Syllabus Deadline Tracker",
    description="Find deadlines in syllabus PDFs and show the upcoming ones in a dashboard",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "syllabus_tracker": ["templates/*.html"],
    },
    python_requires=">=3.8",
    install_requires=[
        "Flask>=2.2",
        "Werkzeug>=2.2",
        "pdfplumber>=0.10.0",
        "psycopg2-binary>=2.9",
        "pytz>=2023.3",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "syllabus-deadlines=syllabus_tracker.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Topic :: Education",
        "Framework :: Flask",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
