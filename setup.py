from setuptools import setup, find_packages

setup(
    name="frame-cutter",
    version="1.0.0",
    description="Cut clips from a video using a list of frame ranges",
    author="Frame Cutter",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    entry_points={
        "console_scripts": [
            "frame-cutter-cli=frame_cutter.cli:main",
        ],
        "gui_scripts": [
            "frame-cutter=frame_cutter.gui:main",
        ],
    },
    install_requires=[
        "PyQt6>=6.5.0",
        "openpyxl>=3.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
