#!/usr/bin/env python3
"""
setup.py - SitemapFrog Distribution Setup
Crawler BFS que gera sitemap.xml validado
"""

from setuptools import setup, find_packages
import pathlib
import re

# === PATHS ===
HERE = pathlib.Path(__file__).parent
README = (HERE / "README.md").read_text(encoding='utf-8') if (HERE / "README.md").exists() else "SitemapFrog - bounded BFS sitemap crawler"

# === VERSION EXTRACTION ===
def get_version():
    """Extrai versão do __init__.py"""
    init_file = HERE / "sitemapfrog" / "__init__.py"
    if init_file.exists():
        content = init_file.read_text(encoding='utf-8')
        match = re.search(r'__version__ = ["\']([^"\']+)["\']', content)
        if match:
            return match.group(1)
    return "0.1.0"

VERSION = get_version()

# === REQUIREMENTS ===
CORE_REQUIREMENTS = [
    "aiohttp>=3.9.0",
    "beautifulsoup4>=4.12.0",
    "lxml>=4.9.0",
    "chardet>=5.0.0",
    "idna>=3.4",
    "psutil>=5.9.0",
]

REPORT_REQUIREMENTS = [
    "pandas>=2.0.0",
]

TEST_REQUIREMENTS = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.21.0",
    "pytest-cov>=4.1.0",
]

# === SETUP CONFIGURATION ===
setup(
    # === BASIC INFO ===
    name="sitemapfrog",
    version=VERSION,
    description="Bounded breadth-first crawler that builds a validated sitemap.xml",
    long_description=README,
    long_description_content_type="text/markdown",

    # === LICENSE ===
    license="MIT",

    # === CLASSIFIERS ===
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
        "Topic :: Internet :: WWW/HTTP :: Site Management",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3 :: Only",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Environment :: Web Environment",
    ],

    keywords=["sitemap", "crawler", "seo", "web-crawler", "sitemap-generator"],

    # === PYTHON REQUIREMENTS ===
    python_requires=">=3.9",

    # === PACKAGES ===
    packages=find_packages(exclude=["tests", "tests.*"]),

    # === DEPENDENCIES ===
    install_requires=CORE_REQUIREMENTS + REPORT_REQUIREMENTS,

    # === OPTIONAL DEPENDENCIES ===
    extras_require={
        "test": TEST_REQUIREMENTS,
        "dev": TEST_REQUIREMENTS,
    },

    # === ENTRY POINTS ===
    entry_points={
        "console_scripts": [
            "sitemapfrog=sitemapfrog.main:cli_entry_point",
        ],
    },

    zip_safe=False,
)
