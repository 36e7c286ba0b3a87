from setuptools import setup


setup(
    name="sheet-quality",
    version="0.1.0",
    description="Spreadsheet upload, preview and rule-based data-quality checks",
    packages=["sheet_quality"],
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
        "streamlit",
        "requests",
    ],
    extras_require={
        "excel-legacy": ["xlrd"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sheet-quality=sheet_quality.cli:main",
        ]
    },
)
